import dataclasses
import enum
import json
import pathlib
import typing

from .logging import getLogger

logger = getLogger(__name__)


# Default location of the user configuration (used by the CLI and in tests)
DEFAULT_USER_DIR = pathlib.Path.home() / ".blnverify"


class SymmetryPolicy(str, enum.Enum):
    """What to do with a functionally correct chain that breaks input symmetry."""

    INFORMATIONAL = "informational"
    REJECT = "reject"

    @classmethod
    def parse(cls, value: "str | SymmetryPolicy") -> "SymmetryPolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ValueError(
                f"Unknown symmetry policy {value!r} (expected one of: {choices})"
            ) from None


@dataclasses.dataclass(frozen=True, slots=True)
class ConfigConstants:
    OPTIONS_FILENAME: typing.ClassVar[str] = "options.json"
    DEFAULT_SYMMETRY_POLICY: typing.ClassVar[SymmetryPolicy] = (
        SymmetryPolicy.INFORMATIONAL
    )
    DEFAULT_SOLVER_TIMEOUT_MS: typing.ClassVar[int] = 0

    @staticmethod
    def default_log_dir(user_dir: pathlib.Path | None = None) -> pathlib.Path:
        """Return the default log directory based on the user dir."""
        base = user_dir if user_dir is not None else DEFAULT_USER_DIR
        return base / "logs"


class VerifierConfiguration:
    """
    Manages application-wide configuration from a JSON file, offering
    dictionary-like access.

    >>> import tempfile
    >>> temp_dir = tempfile.TemporaryDirectory()
    >>> config_path = pathlib.Path(temp_dir.name) / "options.json"
    >>> config_path.write_text('{"symmetry_policy": "reject"}')
    29
    >>> config = VerifierConfiguration(config_path)
    >>> config.symmetry_policy
    <SymmetryPolicy.REJECT: 'reject'>
    >>> config["log_dir"] = "/new/logs"
    >>> str(config.log_dir)
    '/new/logs'
    >>> config.save()
    >>> json.loads(config_path.read_text())["log_dir"]
    '/new/logs'
    >>> temp_dir.cleanup()
    """

    def __init__(
        self,
        config_path: pathlib.Path | str | None = None,
        *,
        user_dir: pathlib.Path | str | None = None,
    ):
        """
        Initializes and loads the configuration.

        Args:
            config_path: Path to the JSON config file. If None, defaults to
                         'options.json' in the user directory.
            user_dir: Directory holding the user configuration and logs.
                      If None, defaults to ~/.blnverify.
        """
        self._user_dir = (
            pathlib.Path(user_dir) if user_dir is not None else DEFAULT_USER_DIR
        )
        if config_path is not None:
            self.config_file = pathlib.Path(config_path)
        else:
            self.config_file = self._user_dir / ConfigConstants.OPTIONS_FILENAME

        self._options: dict[str, typing.Any] = {}
        self._load()

    def _load(self) -> None:
        """Loads configuration from the JSON file, handling potential errors."""
        try:
            with self.config_file.open("r", encoding="utf-8") as fp:
                data = json.load(fp)
        except FileNotFoundError:
            logger.debug("Configuration file %s not found", self.config_file)
            data = {}
        except json.JSONDecodeError:
            logger.error("Failed to parse config file: %s", self.config_file)
            data = {}

        if not isinstance(data, dict):
            logger.warning(
                "Configuration in %s is not a JSON object; using defaults in memory.",
                self.config_file,
            )
            data = {}
        self._options = data

    def save(self) -> None:
        """Saves the current configuration to the JSON file."""
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            with self.config_file.open("w", encoding="utf-8") as fp:
                json.dump(self._options, fp, indent=2)
            logger.info("Configuration saved to %s", self.config_file)
        except IOError as e:
            logger.error("Failed to save configuration to %s: %s", self.config_file, e)

    @property
    def user_dir(self) -> pathlib.Path:
        return self._user_dir

    @property
    def log_dir(self) -> pathlib.Path:
        """Returns the configured log directory, or dynamically computes default if not set."""
        path_str = self._options.get("log_dir")
        if not path_str:
            path_str = str(ConfigConstants.default_log_dir(self._user_dir))
            self._options["log_dir"] = path_str
        return pathlib.Path(path_str)

    @property
    def symmetry_policy(self) -> SymmetryPolicy:
        value = self._options.get("symmetry_policy")
        if value is None:
            return ConfigConstants.DEFAULT_SYMMETRY_POLICY
        try:
            return SymmetryPolicy.parse(value)
        except ValueError as e:
            logger.warning("Ignoring symmetry_policy in %s: %s", self.config_file, e)
            return ConfigConstants.DEFAULT_SYMMETRY_POLICY

    @property
    def solver_timeout_ms(self) -> int:
        value = self._options.get(
            "solver_timeout_ms", ConfigConstants.DEFAULT_SOLVER_TIMEOUT_MS
        )
        try:
            return max(0, int(value))
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid solver_timeout_ms %r", value)
            return ConfigConstants.DEFAULT_SOLVER_TIMEOUT_MS

    def __getitem__(self, name: str) -> typing.Any:
        """Provides dictionary-style read access."""
        return self._options[name]

    def __setitem__(self, name: str, value: typing.Any) -> None:
        """Provides dictionary-style write access."""
        self._options[name] = value

    def get(self, name: str, default: typing.Any = None) -> typing.Any:
        """Provides dictionary-style read access with a default value."""
        return self._options.get(name, default)

    def set(self, name: str, value: typing.Any) -> None:
        """Provides dictionary-style write access."""
        self._options[name] = value
