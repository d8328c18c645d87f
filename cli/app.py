"""
cli/app.py - 메인 CLI 엔트리포인트

Click 기반의 CLI 애플리케이션 진입점입니다.

명령어 구조:
    ert --version                       # 버전 표시
    ert sync                            # 릴리스 태그 동기화
    ert sync --scope Cluster-A --dry-run
    ert catalog 20036589 21424296       # 빌드 → 릴리스 이름 조회

환경변수:
    VSPHERE_SERVER / VSPHERE_USER / VSPHERE_PASSWORD: vCenter 접속 정보
    ERT_CATALOG_URL: 카탈로그 위치
    ERT_CATALOG_VERIFY_TLS: 카탈로그 인증서 검증 여부
    ERT_LANG: UI 언어 (ko, en)

Usage:
    $ ert sync -c ./esxi_builds.json
    $ python -m cli.app sync --help
"""

import sys
from pathlib import Path

# 프로젝트 루트를 sys.path에 추가 (python -m cli.app 실행 시)
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import click  # noqa: E402
from click import Context  # noqa: E402

from cli.i18n import SUPPORTED_LANGS, set_lang, t  # noqa: E402
from core.config import LogConfig, get_catalog_location, get_catalog_verify_tls, get_version, settings  # noqa: E402

VERSION = get_version()


def _setup_logging(debug: bool) -> None:
    """로깅 설정

    INFO 로그가 도구 출력에 섞이지 않도록 기본은 WARNING입니다.
    """
    from cli.ui.console import get_logging_handler

    config = LogConfig.from_env(default_level="WARNING")
    if debug:
        config.level = "DEBUG"
    config.apply(handler=get_logging_handler())


@click.group()
@click.version_option(VERSION, prog_name="ert")
@click.option(
    "--lang",
    type=click.Choice(list(SUPPORTED_LANGS)),
    default="ko",
    envvar="ERT_LANG",
    help="UI 언어 설정 / UI language (ko: 한국어, en: English)",
)
@click.option("--debug", is_flag=True, help="디버그 로그 출력")
@click.pass_context
def cli(ctx: Context, lang: str, debug: bool) -> None:
    """ERT - ESXi 릴리스 이름 태그 동기화 CLI"""
    set_lang(lang)
    _setup_logging(debug)

    ctx.ensure_object(dict)
    ctx.obj["lang"] = lang
    ctx.obj["debug"] = debug


@cli.command("sync")
@click.option("-S", "--server", envvar="VSPHERE_SERVER", help="vCenter 주소")
@click.option("-u", "--user", envvar="VSPHERE_USER", help="vCenter 사용자")
@click.option("--password", envvar="VSPHERE_PASSWORD", help="vCenter 비밀번호")
@click.option("--insecure", is_flag=True, help="vCenter 인증서 검증 생략")
@click.option("-c", "--catalog", default=None, help="릴리스 카탈로그 위치 (로컬 경로 또는 URL)")
@click.option("--category", default=None, help=f"태그 카테고리 (기본: {settings.DEFAULT_CATEGORY_NAME})")
@click.option("--scope", default=None, help="범위: 클러스터/데이터센터/폴더 이름")
@click.option(
    "--verify-tls/--no-verify-tls",
    "verify_tls",
    default=None,
    help="카탈로그 다운로드 시 인증서 검증 (기본: ERT_CATALOG_VERIFY_TLS, 미설정 시 검증 안 함)",
)
@click.option("--dry-run", is_flag=True, help="변경 없이 계획만 출력")
@click.option("-f", "--format", "output_format", type=click.Choice(list(settings.OUTPUT_FORMATS)), default="console")
@click.option("-o", "--output", default=None, help="JSON 리포트 저장 경로")
@click.option("-q", "--quiet", is_flag=True, help="최소 출력 모드")
@click.pass_context
def sync_command(
    ctx: Context,
    server: str | None,
    user: str | None,
    password: str | None,
    insecure: bool,
    catalog: str | None,
    category: str | None,
    scope: str | None,
    verify_tls: bool | None,
    dry_run: bool,
    output_format: str,
    output: str | None,
    quiet: bool,
) -> None:
    """호스트 빌드 번호로 릴리스 이름 태그를 동기화합니다."""
    from cli.runner import SyncConfig, run_sync
    from cli.ui.console import set_quiet

    # JSON을 표준 출력으로 내보낼 때는 진행 메시지를 숨김
    set_quiet(quiet or (output_format == "json" and not output))

    config = SyncConfig(
        server=server,
        user=user,
        password=password,
        insecure=insecure,
        catalog=catalog,
        category=category,
        scope=scope,
        verify_tls=verify_tls,
        dry_run=dry_run,
        format=output_format,
        output=output,
        quiet=quiet,
        debug=bool(ctx.obj and ctx.obj.get("debug")),
    )
    raise SystemExit(run_sync(config))


@cli.command("catalog")
@click.argument("builds", nargs=-1)
@click.option("-c", "--catalog", default=None, help="릴리스 카탈로그 위치 (로컬 경로 또는 URL)")
@click.option("--verify-tls/--no-verify-tls", "verify_tls", default=None, help="인증서 검증")
@click.option("--json", "as_json", is_flag=True, help="JSON 형식으로 출력")
def catalog_command(builds: tuple[str, ...], catalog: str | None, verify_tls: bool | None, as_json: bool) -> None:
    """릴리스 카탈로그를 로드하고 빌드 번호의 태그 이름을 조회합니다."""
    import json as json_module

    from rich.table import Table

    from cli.ui.console import console, print_error, print_success
    from core.exceptions import ERTError, format_error_for_user
    from tagging.esxi_release.catalog import load_catalog, normalize_label

    location = catalog or get_catalog_location()
    try:
        loaded = load_catalog(location, verify_tls=get_catalog_verify_tls() if verify_tls is None else verify_tls)
    except ERTError as e:
        print_error(format_error_for_user(e))
        raise SystemExit(1) from e

    lookups = {}
    for build in builds:
        descriptor = loaded.get(build)
        lookups[build] = normalize_label(descriptor.version) if descriptor else None

    if as_json:
        click.echo(
            json_module.dumps(
                {"location": str(loaded.location), "count": len(loaded), "builds": lookups},
                indent=2,
                ensure_ascii=False,
            )
        )
        return

    print_success(t("sync.catalog_loaded", count=len(loaded), location=loaded.location))
    if not builds:
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Build")
    table.add_column("Version")
    table.add_column("Tag")
    for build, label in lookups.items():
        if label is None:
            table.add_row(build, "-", f"[yellow]{t('sync.catalog_not_found')}[/yellow]")
        else:
            table.add_row(build, loaded[build].version, label)
    console.print(table)

    if any(label is None for label in lookups.values()):
        raise SystemExit(1)


if __name__ == "__main__":
    cli()
