import pytest


@pytest.fixture(autouse=True)
def _reset_structmap_shape_cache():
    # Tests run in one Python process; clear process-global cache between tests.
    import structmap.fields

    structmap.fields.clear_cache()
    yield
    structmap.fields.clear_cache()
