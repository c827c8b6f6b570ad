pytest_plugins = ["tedium.testing.conftest"]
