"""
    Main entry point for the hardware health audit
"""
import argparse
import sys

from core.assembler import run_audit
from core.config import AuditConfig
from core.report import report_json, write_json_report
from helpers.logger import configure_logging, get_logger
from reports.formatter import print_report

log = get_logger(__name__)


def _names(value):
    if value is None:
        return None
    return frozenset(v.strip() for v in value.split(",") if v.strip())


def build_parser():
    parser = argparse.ArgumentParser(prog="auditor", description="Hardware health audit")
    commands = parser.add_subparsers(dest="command", required=True)

    audit = commands.add_parser("audit", help="audit this machine and print a health report")
    audit.add_argument("-o", "--output", help="also write the JSON report to this file")
    audit.add_argument("--json", action="store_true", help="print the JSON report instead of the summary")
    audit.add_argument("-v", "--verbose", action="store_true", help="show metrics and debug logging")
    audit.add_argument("--timeout", type=float, dest="audit_timeout_s", help="overall audit budget in seconds")
    audit.add_argument("--command-timeout", type=float, dest="command_timeout_s",
                       help="timeout for a single diagnostic command in seconds")
    audit.add_argument("--allow", help="comma separated probes or components to run")
    audit.add_argument("--deny", help="comma separated probes or components to skip")
    audit.add_argument("--ping-host", dest="ping_host", help="latency target for the network probe")
    audit.add_argument("--rated-cycles", type=int, dest="battery_rated_cycles",
                       help="rated battery cycle life when the OS does not report one")
    audit.add_argument("--rated-tbw", type=float, dest="storage_rated_tbw",
                       help="rated storage endurance in TB written")
    audit.add_argument("--dead-pixels", type=int, dest="screen_dead_pixels",
                       help="dead or stuck pixels counted during the manual screen test")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        config = AuditConfig.from_env().with_overrides(
            audit_timeout_s=args.audit_timeout_s,
            command_timeout_s=args.command_timeout_s,
            allow=_names(args.allow),
            deny=_names(args.deny),
            ping_host=args.ping_host,
            battery_rated_cycles=args.battery_rated_cycles,
            storage_rated_tbw=args.storage_rated_tbw,
            screen_dead_pixels=args.screen_dead_pixels,
            log_level="DEBUG" if args.verbose else None,
        )
    except ValueError as e:
        print(f"invalid configuration: {e}", file=sys.stderr)
        return 2

    configure_logging(config.log_level)
    report = run_audit(config)

    if args.json:
        print(report_json(report))
    else:
        print_report(report, verbose=args.verbose)

    if args.output:
        path = write_json_report(report, args.output)
        log.info("report written to %s", path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
