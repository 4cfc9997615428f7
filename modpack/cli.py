"""
CLI 模块

命令行接口实现：update、report、install。
"""

import asyncio
from pathlib import Path
from typing import Optional

import click
import json5
from loguru import logger

from modpack import __version__
from modpack.models import ModpackConfig
from modpack.download import DownloadManager
from modpack.exceptions import ConfigError, ConfigParseError, ModpackError
from modpack.logger import setup_logger
from modpack.services import (
    AutoConfirm,
    ConsolePrompter,
    Installer,
    ModrinthClient,
    ReportGenerator,
    StateStore,
    UpdateEngine,
)


DEFAULT_CONFIG_FILENAME = "modpack.json"
DEFAULT_LOCK_FILENAME = "modpack.lock"


def load_config(config_path: str) -> ModpackConfig:
    """加载配置文件（允许注释与尾随逗号）"""
    path = Path(config_path)

    if not path.exists():
        raise ConfigError(f"配置文件不存在: {config_path}", context={"path": config_path})

    try:
        data = json5.loads(path.read_text(encoding="utf-8"))
    except ValueError as e:
        raise ConfigParseError(
            f"配置文件解析失败: {config_path}: {e}", context={"path": config_path}
        ) from e

    return ModpackConfig.from_dict(data, root=path.resolve().parent)


def lock_path_for(config_path: str, lock_path: Optional[str]) -> Path:
    if lock_path:
        return Path(lock_path)
    return Path(config_path).resolve().parent / DEFAULT_LOCK_FILENAME


def ensure_directories(config: ModpackConfig):
    for directory in config.directories.values():
        if directory.exists():
            continue
        logger.debug(f"'{directory.name}' 目录不存在，正在创建...")
        directory.mkdir(parents=True, exist_ok=True)


async def run_update(
    config_path: str,
    lock_path: Optional[str],
    show_changelog: bool,
    assume_yes: bool,
):
    config = load_config(config_path)
    store = StateStore(lock_path_for(config_path, lock_path))

    logger.info(f"正在检查 Minecraft [{', '.join(config.versions)}] 的更新...")
    ensure_directories(config)

    state = store.load()
    prompter = AutoConfirm() if assume_yes else ConsolePrompter()

    async with ModrinthClient() as client, DownloadManager() as downloader:
        engine = UpdateEngine(client, config, prompter, show_changelog=show_changelog)
        state = await engine.run(state)
        store.save(state)

        await Installer(client, config, downloader).install(state)


async def run_report(config_path: str, game_versions: list[str]):
    config = load_config(config_path)

    logger.info(f"正在生成 Minecraft [{', '.join(game_versions)}] 的兼容性报告...")

    async with ModrinthClient() as client:
        summary = await ReportGenerator(client, config).run(game_versions)
    summary.log()
    return summary


async def run_install(config_path: str, lock_path: Optional[str]):
    config = load_config(config_path)
    store = StateStore(lock_path_for(config_path, lock_path))
    if not store.path.exists():
        raise ConfigError(f"锁文件不存在: {store.path}", context={"path": str(store.path)})

    logger.info(f"正在安装 Minecraft [{', '.join(config.versions)}] 的整合包...")
    ensure_directories(config)

    state = store.load()
    async with ModrinthClient() as client, DownloadManager() as downloader:
        await Installer(client, config, downloader).install(state)


def run(coro):
    """运行协程，把错误转换为 ClickException（非零退出码）"""
    try:
        return asyncio.run(coro)
    except ModpackError as e:
        logger.error(f"运行失败: {e}")
        raise click.ClickException(str(e))
    except Exception as e:
        logger.exception(f"运行时错误: {e}")
        raise click.ClickException(f"运行时错误: {e}")


@click.group()
@click.option(
    "--config",
    "config_path",
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    help="配置文件路径",
)
@click.option("--lock", "lock_path", default=None, help="锁文件路径（默认与配置文件同目录）")
@click.version_option(version=__version__)
@click.pass_context
def main(ctx: click.Context, config_path: str, lock_path: Optional[str]):
    """Modpack - Minecraft 整合包同步工具"""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["lock_path"] = lock_path


@main.command()
@click.option("-c", "--show-changelog", is_flag=True, help="显示新版本的更新日志")
@click.option("-y", "--yes", "assume_yes", is_flag=True, help="跳过所有安装确认")
@click.option("-v", "--verbose", is_flag=True, help="输出调试信息")
@click.pass_context
def update(ctx: click.Context, show_changelog: bool, assume_yes: bool, verbose: bool):
    """检查更新并安装"""
    setup_logger(level="DEBUG" if verbose else None)
    run(
        run_update(
            ctx.obj["config_path"], ctx.obj["lock_path"], show_changelog, assume_yes
        )
    )


@main.command()
@click.argument("versions", nargs=-1, required=True)
@click.pass_context
def report(ctx: click.Context, versions: tuple):
    """检查整合包对指定 Minecraft 版本的兼容性"""
    setup_logger()
    run(run_report(ctx.obj["config_path"], list(versions)))


@main.command()
@click.option("-v", "--verbose", is_flag=True, help="输出调试信息")
@click.pass_context
def install(ctx: click.Context, verbose: bool):
    """按锁文件安装整合包"""
    setup_logger(level="DEBUG" if verbose else None)
    run(run_install(ctx.obj["config_path"], ctx.obj["lock_path"]))


if __name__ == "__main__":
    main()
