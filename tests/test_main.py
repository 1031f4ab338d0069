import main
import routes


def test_app_serves_router():
    paths = {route.path for route in main.app.routes}
    assert {"/health", "/play/hint", "/api/respond"} <= paths


def test_env_loaded_only_by_routes():
    assert hasattr(routes, "load_dotenv")
    assert not hasattr(main, "load_dotenv")
