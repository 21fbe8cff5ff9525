import pytest


@pytest.fixture(autouse=True)
def _reset_fluentconv_field_tables():
    # Tests run in one Python process; clear process-global type caches between tests.
    import fluentconv.introspect

    fluentconv.introspect.clear_field_tables()
    yield
    fluentconv.introspect.clear_field_tables()
