from __future__ import annotations

import argparse
import logging
import sys
from contextlib import ExitStack
from typing import Any, Dict, List, Optional

import httpx
import yaml

from .advisory import render_advisory
from .catalog import check_catalog, load_catalog
from .errors import InstallerError, describe_failure
from .install_config import InstallConfig, load_install_config
from .install_target import InstallTarget
from .lib.platform_detect import detect_platform
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import InstallCtx, run_pipeline
from .smoke_test import SmokeReport, run_smoke_test
from .steps import (
    FetchArtifactStep,
    GenerateCompletionsStep,
    InstallBinaryStep,
    InstallDocsStep,
    PostInstallAdvisoryStep,
    ResolvePlatformStep,
)

logger = logging.getLogger(__name__)

# Fatal failures the CLI reports as one line instead of a traceback.
# CatalogError and config errors are ValueErrors; transport failures are
# httpx.HTTPError or OSError.
REPORTED_ERRORS = (InstallerError, httpx.HTTPError, OSError, ValueError, yaml.YAMLError)


def build_steps():
    return [
        ResolvePlatformStep(),
        FetchArtifactStep(),
        InstallBinaryStep(),
        GenerateCompletionsStep(),
        InstallDocsStep(),
        PostInstallAdvisoryStep(),
    ]


def run_install(
    *,
    prefix: str,
    catalog_path: Optional[str] = None,
    operating_system: Optional[str] = None,
    architecture: Optional[str] = None,
    shells: Optional[List[str]] = None,
    dry_run: bool = False,
    timeout_s: Optional[float] = None,
    client: Optional[httpx.Client] = None,
) -> Dict[str, Any]:
    """Resolve, verify and install one release; return the install summary."""

    catalog = load_catalog(catalog_path)
    target = InstallTarget.for_prefix(prefix, name=catalog.name)

    state: Dict[str, Any] = {"name": catalog.name, "version": catalog.version, "dry_run": dry_run}

    with ExitStack() as resources:
        ctx = InstallCtx(
            catalog=catalog,
            target=target,
            resources=resources,
            operating_system=operating_system,
            architecture=architecture,
            shells=shells,
            dry_run=dry_run,
            timeout_s=timeout_s,
            client=client,
        )
        result = run_pipeline(ctx=ctx, state=state, steps=build_steps())

    state = result.state
    state.pop("payload", None)
    state["ran_steps"] = result.ran_steps
    if state["warnings"]:
        logger.warning("Installed with warnings: %s", "; ".join(state["warnings"]))
    return state


def _config(args: argparse.Namespace) -> InstallConfig:
    return load_install_config(getattr(args, "config", None))


def _log(args: argparse.Namespace, cfg: InstallConfig) -> None:
    configure_logging(log_path=args.log or cfg.log_path or DEFAULT_LOG_PATH)


def _fail(e: BaseException) -> int:
    logger.error("%s", describe_failure(e), exc_info=True)
    print(f"error: {describe_failure(e)}", file=sys.stderr)
    return 1


def cmd_install(args: argparse.Namespace) -> int:
    try:
        cfg = _config(args)
    except REPORTED_ERRORS as e:
        return _fail(e)
    _log(args, cfg)

    try:
        state = run_install(
            prefix=args.prefix or cfg.prefix,
            catalog_path=args.catalog or cfg.catalog_path,
            operating_system=args.os,
            architecture=args.arch,
            shells=cfg.shells,
            dry_run=bool(args.dry_run) or cfg.dry_run,
            timeout_s=cfg.timeout_s,
        )
    except REPORTED_ERRORS as e:
        return _fail(e)

    verb = "Would install" if state["dry_run"] else "Installed"
    print(f"{verb} {state['name']} {state['version']} -> {state['installed'].get('binary')}")
    for w in state["warnings"]:
        print(f"warning: {w}", file=sys.stderr)
    print()
    print(state["advisory"], end="")
    return 0


def _print_report(report: SmokeReport) -> None:
    for c in report.checks:
        status = "ok" if c.ok else "FAIL"
        print(f"{status:4} {c.name}: {c.detail}")


def cmd_test(args: argparse.Namespace) -> int:
    try:
        cfg = _config(args)
        _log(args, cfg)
        catalog = load_catalog(args.catalog or cfg.catalog_path)
    except REPORTED_ERRORS as e:
        return _fail(e)
    target = InstallTarget.for_prefix(args.prefix or cfg.prefix, name=catalog.name)
    report = run_smoke_test(target.binary_path, catalog.version, timeout_s=cfg.timeout_s)
    _print_report(report)
    return 0 if report.ok else 1


def cmd_resolve(args: argparse.Namespace) -> int:
    catalog = load_catalog(args.catalog)
    os_name, arch = detect_platform(operating_system=args.os, architecture=args.arch)
    try:
        a = catalog.resolve(os_name, arch)
    except InstallerError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    print(f"{a.operating_system}/{a.architecture} {a.version}")
    print(f"url:    {a.url}")
    print(f"sha256: {a.sha256 or '-'}")
    return 0


def cmd_advisory(args: argparse.Namespace) -> int:
    print(render_advisory(), end="")
    return 0


def cmd_verify_catalog(args: argparse.Namespace) -> int:
    catalog = load_catalog(args.catalog)
    problems = check_catalog(catalog)
    for p in problems:
        print(f"problem: {p}")
    if not problems:
        print(f"{catalog.name} {catalog.version}: {len(catalog.artifacts)} platforms, catalog ok")
    return 1 if problems else 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="pass-cli-installer")
    sub = p.add_subparsers(dest="subcmd", required=True)

    def common(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("--catalog", default=None, help="Catalog manifest (YAML); defaults to the bundled one")

    def platform_flags(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("--os", default=None, help="Override detected OS (macos|linux)")
        sp.add_argument("--arch", default=None, help="Override detected architecture (amd64|arm64)")

    def run_flags(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("--prefix", default=None, help="Install prefix (default: ~/.local)")
        sp.add_argument("--config", default=None, help="Install config (YAML)")
        sp.add_argument("--log", default=None, help="Path to installer log")

    sp = sub.add_parser("install", help="Resolve, verify and install the release")
    common(sp)
    platform_flags(sp)
    run_flags(sp)
    sp.add_argument("--dry-run", action="store_true", help="Verify the artifact but write nothing")
    sp.set_defaults(func=cmd_install)

    sp = sub.add_parser("test", help="Smoke-test an installed binary")
    common(sp)
    run_flags(sp)
    sp.set_defaults(func=cmd_test)

    sp = sub.add_parser("resolve", help="Show the artifact for this (or a given) platform")
    common(sp)
    platform_flags(sp)
    sp.set_defaults(func=cmd_resolve)

    sp = sub.add_parser("advisory", help="Print post-install guidance")
    sp.set_defaults(func=cmd_advisory)

    sp = sub.add_parser("verify-catalog", help="Check the catalog covers every supported platform once")
    common(sp)
    sp.set_defaults(func=cmd_verify_catalog)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    try:
        return int(args.func(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
