"""Unit tests for configuration, document loading and argument parsing."""

import json
import logging
import os
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

import requests
from pydantic import ValidationError

from swagger_mcp.exceptions import ConfigurationError, SwaggerSpecError
from swagger_mcp.utils import (
    ServerConfig,
    configure_logging,
    load_spec_from_file,
    load_spec_from_url,
    load_swagger_document,
    parse_tool_arguments,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@patch("swagger_mcp.utils.load_dotenv")
class TestServerConfig(unittest.TestCase):
    """Tests for ServerConfig."""

    def test_defaults(self, _):
        with patch.dict(os.environ, {}, clear=True):
            config = ServerConfig.from_env()

        self.assertIsNone(config.swagger_url)
        self.assertIsNone(config.swagger_file)
        self.assertIsNone(config.tool_prefix)
        self.assertFalse(config.ignore_ssl)
        self.assertIsNone(config.auth_header)

    def test_environment_variables(self, _):
        env = {
            "SWAGGER_URL": "https://api.example.com/swagger.json",
            "SWAGGER_TOOL_PREFIX": "api",
            "SWAGGER_BASE_URL": "http://localhost:8080",
            "SWAGGER_IGNORE_SSL": "TRUE",
            "SWAGGER_AUTH_HEADER": "Bearer xyz",
        }
        with patch.dict(os.environ, env, clear=True):
            config = ServerConfig.from_env()

        self.assertEqual(config.swagger_url, "https://api.example.com/swagger.json")
        self.assertEqual(config.tool_prefix, "api")
        self.assertEqual(config.base_url, "http://localhost:8080")
        self.assertTrue(config.ignore_ssl)
        self.assertEqual(config.auth_header, "Bearer xyz")

    def test_ignore_ssl_only_true_counts(self, _):
        for value in ["1", "yes", "false", ""]:
            with self.subTest(value=value):
                with patch.dict(os.environ, {"SWAGGER_IGNORE_SSL": value}, clear=True):
                    self.assertFalse(ServerConfig.from_env().ignore_ssl)

    def test_overrides_win_over_environment(self, _):
        with patch.dict(os.environ, {"SWAGGER_TOOL_PREFIX": "env"}, clear=True):
            config = ServerConfig.from_env(tool_prefix="cli", swagger_file=None)

        self.assertEqual(config.tool_prefix, "cli")
        self.assertIsNone(config.swagger_file)

    def test_ignore_ssl_flag_off_keeps_environment(self, _):
        with patch.dict(os.environ, {"SWAGGER_IGNORE_SSL": "true"}, clear=True):
            config = ServerConfig.from_env(ignore_ssl=False)
        self.assertTrue(config.ignore_ssl)

    def test_unknown_override(self, _):
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(ConfigurationError):
                ServerConfig.from_env(colour="blue")

    def test_config_is_frozen(self, _):
        config = ServerConfig(swagger_file="a.json")
        with self.assertRaises(ValidationError):
            config.swagger_file = "b.json"

    def test_client_config(self, _):
        config = ServerConfig(ignore_ssl=True, auth_header="Bearer abc")
        client_config = config.client_config

        self.assertFalse(client_config.verify)
        self.assertEqual(client_config.headers, {"Authorization": "Bearer abc"})

    def test_require_source(self, _):
        with self.assertRaises(ConfigurationError) as ctx:
            ServerConfig().require_source()
        self.assertEqual(
            str(ctx.exception), "Either --swagger-url or --swagger-file must be provided"
        )
        ServerConfig(swagger_file="a.json").require_source()

    def test_both_sources_warns(self, _):
        config = ServerConfig(swagger_url="https://a.example.com/s.json", swagger_file="a.json")
        with self.assertLogs("swagger_mcp.utils", level="WARNING"):
            config.require_source()


class TestLoadSpecFromFile(unittest.TestCase):
    """Tests for load_spec_from_file."""

    def test_load_json_file(self):
        spec = load_spec_from_file(str(FIXTURES_DIR / "petstore.json"))
        self.assertEqual(spec["swagger"], "2.0")
        self.assertIn("/pets", spec["paths"])

    def test_load_yaml_file(self):
        spec = load_spec_from_file(str(FIXTURES_DIR / "inventory.yaml"))
        self.assertEqual(spec["host"], "inventory.example.com")
        self.assertIn("/items/{itemId}", spec["paths"])

    def test_missing_file(self):
        with self.assertRaises(OSError):
            load_spec_from_file(str(FIXTURES_DIR / "missing.json"))


class TestLoadSpecFromUrl(unittest.TestCase):
    """Tests for load_spec_from_url."""

    def _response(self, text, content_type):
        response = MagicMock()
        response.text = text
        response.headers = {"Content-Type": content_type}
        response.json.side_effect = lambda: json.loads(text)
        return response

    @patch("swagger_mcp.utils.requests.get")
    def test_json_response(self, mock_get):
        mock_get.return_value = self._response('{"paths": {}}', "application/json")

        spec = load_spec_from_url("https://api.example.com/swagger")

        self.assertEqual(spec, {"paths": {}})
        kwargs = mock_get.call_args.kwargs
        self.assertTrue(kwargs["verify"])
        self.assertEqual(kwargs["headers"], {})

    @patch("swagger_mcp.utils.requests.get")
    def test_yaml_response(self, mock_get):
        mock_get.return_value = self._response("paths: {}\nhost: y.example.com\n", "text/yaml")

        spec = load_spec_from_url("https://api.example.com/swagger")

        self.assertEqual(spec["host"], "y.example.com")

    @patch("swagger_mcp.utils.requests.get")
    def test_unlabelled_response_sniffed(self, mock_get):
        mock_get.return_value = self._response("swagger: '2.0'\npaths: {}\n", "text/plain")

        spec = load_spec_from_url("https://api.example.com/swagger")

        self.assertEqual(spec["swagger"], "2.0")

    @patch("swagger_mcp.utils.requests.get")
    def test_client_settings_applied(self, mock_get):
        mock_get.return_value = self._response("{}", "application/json")
        config = ServerConfig(ignore_ssl=True, auth_header="Bearer t").client_config

        load_spec_from_url("https://api.example.com/swagger", config)

        kwargs = mock_get.call_args.kwargs
        self.assertFalse(kwargs["verify"])
        self.assertEqual(kwargs["headers"], {"Authorization": "Bearer t"})


class TestLoadSwaggerDocument(unittest.TestCase):
    """Tests for load_swagger_document."""

    def test_load_from_file(self):
        config = ServerConfig(swagger_file=str(FIXTURES_DIR / "petstore.json"))
        self.assertIn("paths", load_swagger_document(config))

    def test_no_source(self):
        with self.assertRaises(ConfigurationError):
            load_swagger_document(ServerConfig())

    def test_missing_file_wrapped(self):
        config = ServerConfig(swagger_file=str(FIXTURES_DIR / "missing.json"))
        with self.assertRaises(SwaggerSpecError) as ctx:
            load_swagger_document(config)
        self.assertIn("Failed to load swagger document", str(ctx.exception))

    @patch("swagger_mcp.utils.requests.get")
    def test_network_error_wrapped(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("unreachable")
        config = ServerConfig(swagger_url="https://api.example.com/swagger.json")

        with self.assertRaises(SwaggerSpecError):
            load_swagger_document(config)

    @patch("swagger_mcp.utils.load_spec_from_file")
    def test_non_mapping_document(self, mock_load):
        mock_load.return_value = ["not", "a", "mapping"]
        with self.assertRaises(SwaggerSpecError):
            load_swagger_document(ServerConfig(swagger_file="list.json"))

    @patch("swagger_mcp.utils.load_spec_from_file")
    @patch("swagger_mcp.utils.load_spec_from_url")
    def test_url_preferred_over_file(self, mock_url, mock_file):
        mock_url.return_value = {"paths": {}}
        config = ServerConfig(
            swagger_url="https://api.example.com/swagger.json", swagger_file="a.json"
        )

        load_swagger_document(config)

        mock_url.assert_called_once()
        mock_file.assert_not_called()


class TestParseToolArguments(unittest.TestCase):
    """Tests for parse_tool_arguments."""

    def setUp(self):
        self.schema = {
            "type": "object",
            "properties": {
                "limit": {"type": "number"},
                "ratio": {"type": "number"},
                "verbose": {"type": "boolean"},
                "tags": {"type": "array"},
                "filter": {"type": "object"},
                "status": {"type": "string"},
            },
            "required": ["limit"],
        }

    def test_name_value_pairs_are_coerced(self):
        arguments = parse_tool_arguments(
            self.schema,
            [
                "limit=10",
                "ratio=0.5",
                "verbose=true",
                "tags=a, b",
                'filter={"x": 1}',
                'status="sold"',
            ],
        )
        self.assertEqual(
            arguments,
            {
                "limit": 10,
                "ratio": 0.5,
                "verbose": True,
                "tags": ["a", "b"],
                "filter": {"x": 1},
                "status": "sold",
            },
        )

    def test_json_array_value(self):
        arguments = parse_tool_arguments(self.schema, ['tags=["x", "y"]', "limit=1"])
        self.assertEqual(arguments["tags"], ["x", "y"])

    def test_invalid_number_kept_as_string(self):
        arguments = parse_tool_arguments(self.schema, ["limit=many"])
        self.assertEqual(arguments["limit"], "many")

    def test_boolean_values(self):
        for raw, expected in [("true", True), ("FALSE", False), ("True", True)]:
            with self.subTest(raw=raw):
                arguments = parse_tool_arguments(self.schema, [f"verbose={raw}", "limit=1"])
                self.assertIs(arguments["verbose"], expected)

    def test_invalid_boolean_kept_as_string(self):
        with self.assertLogs("swagger_mcp.utils", level="WARNING") as logs:
            arguments = parse_tool_arguments(self.schema, ["verbose=yes", "limit=1"])
        self.assertEqual(arguments["verbose"], "yes")
        self.assertIn("not a valid boolean for verbose", logs.output[0])

    def test_single_json_object(self):
        arguments = parse_tool_arguments(self.schema, ['{"limit": 3, "extra": [1]}'])
        self.assertEqual(arguments, {"limit": 3, "extra": [1]})

    def test_value_may_contain_equals(self):
        arguments = parse_tool_arguments(self.schema, ["status=a=b", "limit=1"])
        self.assertEqual(arguments["status"], "a=b")

    def test_missing_required_only_warns(self):
        with self.assertLogs("swagger_mcp.utils", level="WARNING") as logs:
            arguments = parse_tool_arguments(self.schema, ["status=sold"])
        self.assertEqual(arguments, {"status": "sold"})
        self.assertIn("Missing required parameters: limit", logs.output[0])

    def test_malformed_argument(self):
        with self.assertRaises(ValueError):
            parse_tool_arguments(self.schema, ["limit"])

    def test_malformed_json(self):
        with self.assertRaises(ValueError):
            parse_tool_arguments(self.schema, ["{not json"])

    def test_no_arguments(self):
        self.assertEqual(parse_tool_arguments({"properties": {}, "required": []}, []), {})


class TestConfigureLogging(unittest.TestCase):
    """Tests for configure_logging."""

    def setUp(self):
        self.root = logging.getLogger()
        self.saved_handlers = self.root.handlers[:]
        self.saved_level = self.root.level

    def tearDown(self):
        self.root.handlers = self.saved_handlers
        self.root.setLevel(self.saved_level)

    def test_debug_level(self):
        configure_logging(debug=True)
        self.assertEqual(self.root.level, logging.DEBUG)

    def test_handler_added_once(self):
        self.root.handlers = []
        configure_logging()
        configure_logging()
        self.assertEqual(len(self.root.handlers), 1)
        self.assertEqual(self.root.level, logging.INFO)


if __name__ == "__main__":
    unittest.main()
