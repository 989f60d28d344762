def pytest_addoption(parser):
    parser.addoption("--run-e2e", action="store_true", default=False, help="Run E2E tests")
