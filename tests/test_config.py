from tmsu_db.config import TmsuDBConfig, load_config


def test_defaults(monkeypatch):
    for name in ("TMSU_DB", "TMSU_ROOT_PATH", "TMSU_ENABLE_LOGGING", "TMSU_VERBOSITY"):
        monkeypatch.delenv(name, raising=False)

    assert load_config() == TmsuDBConfig()


def test_environment(monkeypatch):
    monkeypatch.setenv("TMSU_DB", "mysql://tmsu@tcp(db)/tags")
    monkeypatch.setenv("TMSU_ROOT_PATH", "/srv/media")
    monkeypatch.setenv("TMSU_ENABLE_LOGGING", "yes")
    monkeypatch.setenv("TMSU_VERBOSITY", "3")

    cfg = load_config()

    assert cfg.database_path == "mysql://tmsu@tcp(db)/tags"
    assert cfg.root_path == "/srv/media"
    assert cfg.enable_logging is True
    assert cfg.verbosity == 3


def test_bad_verbosity_falls_back(monkeypatch):
    monkeypatch.setenv("TMSU_VERBOSITY", "loud")
    assert load_config().verbosity == 1
