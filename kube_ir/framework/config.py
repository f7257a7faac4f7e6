from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from kube_ir.optimize import DEFAULT_PASS_SEQUENCE
from passkit.config_namespace import ConfigNamespace
from passkit.engine.pipeline import ALLOWED_ON_ERROR, OnError

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class OptimizeConfig:
    passes: tuple[str, ...] = DEFAULT_PASS_SEQUENCE
    on_error: OnError = "continue"


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    log_dir: str | None = None


@dataclass(frozen=True)
class RunConfig:
    optimize: OptimizeConfig
    logging: LoggingConfig
    strict: bool = False

    @staticmethod
    def from_dict(cfg: Mapping[str, Any]) -> tuple["RunConfig", list[str]]:
        """
        Parse and validate configuration, returning (RunConfig, warnings).

        Unknown keys are reported as warnings, or raised when `strict: true`.

        Raises:
            ValueError / TypeError: if keys are missing or invalid.
        """

        if not isinstance(cfg, Mapping):
            raise ValueError("Config must be a mapping")

        root = ConfigNamespace(dict(cfg), path="")
        strict = root.get_bool("strict", default=False)

        optimize_ns = root.namespace("optimize")
        passes = optimize_ns.get_list_str("passes", default=list(DEFAULT_PASS_SEQUENCE))
        on_error = optimize_ns.get_str("on_error", default="continue", choices=ALLOWED_ON_ERROR)

        logging_ns = root.namespace("logging")
        raw_level = logging_ns.get_str("level", default="INFO", nullable=True)
        level = (raw_level or "").upper()
        if level not in LOG_LEVELS:
            raise ValueError(
                f"logging.level must be one of: {', '.join(LOG_LEVELS)} (got {raw_level!r})"
            )
        log_dir = logging_ns.get_str("log_dir", default=None, nullable=True)

        warnings: list[str] = []
        if not passes:
            warnings.append(
                "optimize.passes is empty: the IR is written without any normalization "
                "(container image pull policies stay unset)"
            )
        unknown = root.unknown_key_paths()
        if unknown:
            if strict:
                root.assert_consumed()
            warnings.append(f"Unknown config keys ignored: {', '.join(sorted(unknown))}")

        return (
            RunConfig(
                optimize=OptimizeConfig(passes=tuple(passes), on_error=on_error),  # type: ignore[arg-type]
                logging=LoggingConfig(level=level, log_dir=log_dir),
                strict=strict,
            ),
            warnings,
        )
