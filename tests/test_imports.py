import importlib


def test_import_api_modules():
    # Always required for the serving stack
    importlib.import_module("model_app.main")
    importlib.import_module("model_app.observability")
    importlib.import_module("model_app.training")


def test_import_does_not_read_settings(monkeypatch):
    import model_app.main

    monkeypatch.setenv("PORT", "not-a-port")
    importlib.reload(model_app.main)

    assert not hasattr(model_app.main, "app")
    assert callable(model_app.main.create_app)
