"""
End-to-end tests for init_logger on explicit and default handles.

Run:
  python -m pytest logutil/tests/test_init_logger.py -v
"""
from __future__ import annotations

import io
import json
import logging
import os
import tempfile
import unittest
import uuid
from unittest import mock

from logutil import (
    ConfigurationError,
    InvalidTargetError,
    LogConfig,
    LoggerHandle,
    default_handle,
    get_logger,
    init_logger,
    with_fields,
)
from logutil.core.logger.formatters import JsonFormatter
from logutil.core.logger.handlers import CompressingRotatingFileHandler


def _fresh_handle() -> LoggerHandle:
    return LoggerHandle(logging.getLogger(f"logutil.tests.init.{uuid.uuid4().hex}"))


class InitLoggerTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = self._tmp.name
        self.handle = _fresh_handle()

    def tearDown(self) -> None:
        self.handle.close()
        self._tmp.cleanup()

    def _read(self, name: str) -> list[str]:
        with open(os.path.join(self.tmp, name), encoding="utf-8") as fh:
            return fh.read().splitlines()


class TestInitLogger(InitLoggerTestCase):
    def test_info_written_debug_suppressed(self) -> None:
        path = os.path.join(self.tmp, "test.log")
        init_logger(LogConfig(filename=path, level="info"), handle=self.handle)
        log = self.handle.logger
        log.info("test")
        log.debug("hidden")
        with_fields(log, name="jack", sex="male").info("ok")
        self.handle.close()

        lines = self._read("test.log")
        self.assertEqual(len(lines), 2)
        for line in lines:
            self.assertIn("level=info", line)
        self.assertNotIn("hidden", "\n".join(lines))
        self.assertIn("name=jack", lines[1])

    def test_json_format_with_fields(self) -> None:
        path = os.path.join(self.tmp, "test.log")
        init_logger(LogConfig(filename=path, format="json"), handle=self.handle)
        with_fields(self.handle.logger, name="jack", sex="male").info("ok")
        self.handle.close()

        (line,) = self._read("test.log")
        data = json.loads(line)
        self.assertEqual(data["name"], "jack")
        self.assertEqual(data["sex"], "male")
        self.assertEqual(data["level"], "info")
        self.assertRegex(data["time"], r"^\d{4}/\d{2}/\d{2} \d{2}:\d{2}:\d{2}\.\d{3}$")

    def test_installs_rotating_handler_with_defaults(self) -> None:
        path = os.path.join(self.tmp, "rot.log")
        init_logger(LogConfig(filename=path), handle=self.handle)
        (handler,) = self.handle.logger.handlers
        self.assertIsInstance(handler, CompressingRotatingFileHandler)
        self.assertEqual(handler.maxBytes, 10 * 1024 * 1024)
        self.assertEqual(handler.backupCount, 5)
        self.assertEqual(handler.max_days, 90)
        self.assertTrue(handler.compress)
        self.assertTrue(handler.local_time)

    def test_rotation_disabled_uses_plain_file(self) -> None:
        path = os.path.join(self.tmp, "plain.log")
        init_logger(LogConfig(filename=path, log_rotate=False), handle=self.handle)
        (handler,) = self.handle.logger.handlers
        self.assertIs(type(handler), logging.FileHandler)

    def test_empty_filename_writes_to_stderr(self) -> None:
        stream = io.StringIO()
        with mock.patch("sys.stderr", stream):
            init_logger(LogConfig(format="console"), handle=self.handle)
            self.handle.logger.warning("to stderr")
        self.assertIn("to stderr", stream.getvalue())
        self.assertIn("WARNING", stream.getvalue())

    def test_directory_target_leaves_state_untouched(self) -> None:
        path = os.path.join(self.tmp, "first.log")
        init_logger(LogConfig(filename=path, level="warn"), handle=self.handle)
        settings = self.handle.settings
        handlers = list(self.handle.logger.handlers)

        with self.assertRaises(InvalidTargetError):
            init_logger(LogConfig(filename=self.tmp, level="debug", format="json"), handle=self.handle)

        self.assertIs(self.handle.settings, settings)
        self.assertEqual(self.handle.logger.handlers, handlers)
        self.assertEqual(self.handle.level, logging.WARNING)

    def test_reinit_replaces_and_closes_previous_handler(self) -> None:
        init_logger(LogConfig(filename=os.path.join(self.tmp, "a.log")), handle=self.handle)
        (first,) = self.handle.logger.handlers
        init_logger(
            LogConfig(filename=os.path.join(self.tmp, "b.log"), format="json"),
            handle=self.handle,
        )
        (second,) = self.handle.logger.handlers
        self.assertIsNot(first, second)
        self.assertIsNone(first.stream)
        self.assertIsInstance(second.formatter, JsonFormatter)

        self.handle.logger.info("second only")
        self.handle.close()
        self.assertEqual(self._read("a.log"), [])
        self.assertEqual(len(self._read("b.log")), 1)

    def test_unopenable_file_raises_configuration_error(self) -> None:
        blocker = os.path.join(self.tmp, "blocker")
        with open(blocker, "w", encoding="utf-8") as fh:
            fh.write("x")
        with self.assertRaises(ConfigurationError) as cm:
            init_logger(LogConfig(filename=os.path.join(blocker, "app.log")), handle=self.handle)
        self.assertIsInstance(cm.exception.cause, OSError)
        self.assertEqual(self.handle.logger.handlers, [])

    def test_set_level(self) -> None:
        init_logger(LogConfig(filename=os.path.join(self.tmp, "l.log")), handle=self.handle)
        self.handle.set_level(logging.ERROR)
        self.assertEqual(self.handle.level, logging.ERROR)
        self.assertFalse(self.handle.logger.isEnabledFor(logging.WARNING))

    def test_close_removes_handlers(self) -> None:
        init_logger(LogConfig(filename=os.path.join(self.tmp, "c.log")), handle=self.handle)
        self.handle.close()
        self.assertEqual(self.handle.logger.handlers, [])
        self.assertIsNone(self.handle.settings)


class TestDefaultHandle(InitLoggerTestCase):
    def setUp(self) -> None:
        super().setUp()
        self._root_level = logging.getLogger().level

    def tearDown(self) -> None:
        default_handle().close()
        logging.getLogger().setLevel(self._root_level)
        super().tearDown()

    def test_default_handle_is_root_singleton(self) -> None:
        self.assertIs(default_handle(), default_handle())
        self.assertIs(default_handle().logger, logging.getLogger())

    def test_module_loggers_reach_file(self) -> None:
        path = os.path.join(self.tmp, "root.log")
        handle = init_logger(LogConfig(filename=path, level="info"))
        self.assertIs(handle, default_handle())

        logging.getLogger("some.module").info("from module")
        get_logger("other.module").debug("not shown")
        handle.close()

        lines = self._read("root.log")
        self.assertEqual(len(lines), 1)
        self.assertIn("from module", lines[0])
        self.assertIn("logger=some.module", lines[0])

    def test_get_logger_configures_from_env(self) -> None:
        path = os.path.join(self.tmp, "env.log")
        with mock.patch.dict(os.environ, {"LOG_FILENAME": path, "LOG_FORMAT": "json", "LOG_LEVEL": "info"}):
            log = get_logger("env.module")
        log.info("hello")
        default_handle().close()
        (line,) = self._read("env.log")
        self.assertEqual(json.loads(line)["msg"], "hello")
