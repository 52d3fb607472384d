"""Tests for the process entry point: listeners are mocked, storage is real."""

import logging

import pytest
from unittest.mock import patch, MagicMock

from api import server
from database import DatabaseManager


class TestParseArgs:
    def test_defaults_are_fixed_contract(self):
        args = server.parse_args([])
        assert args.db == "data.db"
        assert args.http_port == 8080
        assert args.https_port == 8443
        assert args.cert == "server.crt"
        assert args.key == "server.key"
        assert args.no_seed is False

    def test_overrides(self):
        args = server.parse_args(["--db", "x.db", "--http-port", "80", "--https-port", "443", "--no-seed"])
        assert (args.db, args.http_port, args.https_port, args.no_seed) == ("x.db", 80, 443, True)


class TestInitStorage:
    def test_creates_and_seeds(self, db_path):
        server.init_storage(db_path)
        db = DatabaseManager(db_path=db_path, seed=False)
        assert db.count_records() == 2
        db.close()

    def test_three_restarts_keep_two_rows(self, db_path):
        for _ in range(3):
            server.init_storage(db_path)
        db = DatabaseManager(db_path=db_path, seed=False)
        assert db.query("SELECT id, value FROM mydata ORDER BY id") == [
            {"id": 1, "value": "test value"},
            {"id": 2, "value": "another value"},
        ]
        db.close()

    def test_no_seed(self, db_path):
        server.init_storage(db_path, seed=False)
        db = DatabaseManager(db_path=db_path, seed=False)
        assert db.count_records() == 0
        db.close()

    def test_failure_is_fatal(self, tmp_path, caplog):
        with caplog.at_level(logging.CRITICAL), pytest.raises(SystemExit) as exc:
            (tmp_path / "not_a_dir").write_text("")
            server.init_storage(str(tmp_path / "not_a_dir" / "data.db"))
        assert exc.value.code == 1
        assert "Failed to initialize database" in caplog.text


class TestOpenProvider:
    def test_missing_database_is_fatal(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            server.open_provider(str(tmp_path / "missing.db"))
        assert exc.value.code == 1

    def test_opens_existing(self, tmp_db):
        data = server.open_provider(tmp_db.db_path)
        assert data.get_record(1).value == "test value"
        data.close()


class TestListeners:
    def test_redirect_listener_runs_in_daemon_thread(self):
        with patch("api.server.uvicorn.Server") as mock_server_cls, \
             patch("api.server.uvicorn.Config") as mock_config_cls, \
             patch("api.server.threading.Thread") as mock_thread_cls:
            thread = server.start_redirect_listener("0.0.0.0", 8080, 8443)

        _, kwargs = mock_config_cls.call_args
        assert kwargs["port"] == 8080
        assert kwargs["host"] == "0.0.0.0"
        _, thread_kwargs = mock_thread_cls.call_args
        assert thread_kwargs["daemon"] is True
        assert thread_kwargs["args"] == (mock_server_cls.return_value, 8080)
        thread.start.assert_called_once()

    def test_redirect_listener_stop_exits_process(self):
        srv = MagicMock()
        srv.run.side_effect = SystemExit(1)
        with patch("api.server.os._exit") as mock_exit:
            server._serve_redirects(srv, 8080)
        mock_exit.assert_called_once_with(1)

    def test_secure_listener_uses_tls_files(self):
        app = MagicMock()
        with patch("api.server.uvicorn.Server") as mock_server_cls, \
             patch("api.server.uvicorn.Config") as mock_config_cls:
            server.run_secure_listener(app, "0.0.0.0", 8443, "server.crt", "server.key")

        args, kwargs = mock_config_cls.call_args
        assert args[0] is app
        assert kwargs["port"] == 8443
        assert kwargs["ssl_certfile"] == "server.crt"
        assert kwargs["ssl_keyfile"] == "server.key"
        mock_server_cls.return_value.run.assert_called_once()

    def test_secure_listener_missing_cert_is_fatal(self):
        with patch("api.server.uvicorn.Server") as mock_server_cls, \
             patch("api.server.uvicorn.Config"):
            mock_server_cls.return_value.run.side_effect = FileNotFoundError("server.crt")
            with pytest.raises(SystemExit) as exc:
                server.run_secure_listener(MagicMock(), "0.0.0.0", 8443, "server.crt", "server.key")
        assert exc.value.code == 1


class TestMain:
    def test_startup_order(self, db_path):
        calls = []
        with patch("api.server.log.setup_logging"), \
             patch("api.server.start_redirect_listener", side_effect=lambda *a: calls.append(("redirect", a))), \
             patch("api.server.run_secure_listener", side_effect=lambda app, *a: calls.append(("secure", a))):
            server.main(["--db", db_path])

        assert calls == [
            ("redirect", ("0.0.0.0", 8080, 8443)),
            ("secure", ("0.0.0.0", 8443, "server.crt", "server.key")),
        ]
        db = DatabaseManager(db_path=db_path, seed=False)
        assert db.count_records() == 2
        db.close()
