import argparse
import logging
import sys

from rich.console import Console

from kubectl_pod_dive.config import OUTPUT_FORMATS, DiveConfig
from kubectl_pod_dive.engine import dive
from kubectl_pod_dive.errors import PodDiveError
from kubectl_pod_dive.gateway import ClusterGateway, KubernetesGateway, SnapshotGateway
from kubectl_pod_dive.output import error, output_result

logger = logging.getLogger(__name__)

DESCRIPTION = """\
Dives into a node after the desired pod and returns data associated
with the pod no matter where it is running, such as its origin workload,
namespace, the node where it is running and its node pod siblings, as
well as basic health status of it all."""

EPILOG = """\
examples:
  cluster-wide dive after a pod
    kubectl pod-dive thanos-store-0

  restrict the dive to a namespace (faster in big clusters)
    kubectl pod-dive elasticsearch-curator-1576112400-97htk -n logging

  dive into an offline dump of kubectl get pods,nodes,rs,sts,ds -A -o json
    kubectl pod-dive web-0 --snapshot cluster.json"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kubectl pod-dive",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("pod", nargs="?", help="Name of the pod to dive after")
    parser.add_argument(
        "-n", "--namespace", help="Restrict the pod lookup to this namespace"
    )
    parser.add_argument("--context", help="Name of the kubeconfig context to use")
    parser.add_argument("--kubeconfig", help="Path to the kubeconfig file to use")
    parser.add_argument(
        "--request-timeout", help="Seconds to wait for each API request"
    )
    parser.add_argument(
        "--snapshot", help="Read the cluster from a JSON/YAML dump instead of the API"
    )
    parser.add_argument(
        "-o",
        "--format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format (text, json, yaml)",
    )
    parser.add_argument("-v", "--verbose", action="store_true")

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def connect(config: DiveConfig) -> ClusterGateway:
    if config.snapshot:
        logger.debug("Using cluster snapshot %s", config.snapshot)
        return SnapshotGateway.from_file(config.snapshot)
    return KubernetesGateway.connect(
        kubeconfig=config.kubeconfig,
        context=config.context,
        request_timeout=config.request_timeout,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.pod:
        parser.error("A pod name is required!")

    configure_logging(args.verbose)
    err_console = Console(stderr=True)

    try:
        config = DiveConfig.from_args(args)
        gateway = connect(config)
        result = dive(gateway, config.pod, config.namespace)
    except PodDiveError as e:
        error(err_console, str(e))
        return 1

    output_result(result, config.output_format, Console())
    return 0


if __name__ == "__main__":
    sys.exit(main())
