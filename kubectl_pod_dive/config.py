import os
from dataclasses import dataclass
from typing import Any

from kubectl_pod_dive.errors import ConfigurationError

ENV_PREFIX = "POD_DIVE_"
OUTPUT_FORMATS = ("text", "json", "yaml")


def _env(name: str) -> str | None:
    return os.environ.get(f"{ENV_PREFIX}{name.upper().replace('-', '_')}") or None


@dataclass(frozen=True)
class DiveConfig:
    """
    Settings for one invocation. Flags win over POD_DIVE_* environment variables.
    """

    pod: str
    namespace: str | None = None
    context: str | None = None
    kubeconfig: str | None = None
    request_timeout: float | None = None
    snapshot: str | None = None
    output_format: str = "text"
    verbose: bool = False

    @classmethod
    def from_args(cls, args: Any) -> "DiveConfig":
        output_format = args.format or _env("format") or "text"
        if output_format not in OUTPUT_FORMATS:
            raise ConfigurationError(
                f"Unknown output format '{output_format}', "
                f"expected one of {', '.join(OUTPUT_FORMATS)}"
            )

        timeout = args.request_timeout or _env("request-timeout")
        if timeout is not None:
            try:
                timeout = float(timeout)
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid request timeout '{timeout}', expected seconds"
                ) from e
            if timeout <= 0:
                timeout = None

        return cls(
            pod=args.pod,
            namespace=args.namespace or _env("namespace"),
            context=args.context or _env("context"),
            kubeconfig=args.kubeconfig,
            request_timeout=timeout,
            snapshot=args.snapshot or _env("snapshot"),
            output_format=output_format,
            verbose=bool(args.verbose),
        )
