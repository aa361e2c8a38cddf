"""Command-line entry point for inspecting and generating server profiles."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Sequence

from craftprofile import (
    FileProfileService,
    PluginReference,
    ProfileEditor,
    ProfileFormState,
    ProfileParseError,
    ProfileSaveError,
    ProfileSettings,
)
from craftprofile.session import PARSE_FAILURE_MESSAGE


def _parse_plugin_option(value: str) -> PluginReference:
    plugin_id, sep, version = value.partition("=")
    plugin_id = plugin_id.strip()
    if not sep or not plugin_id:
        raise argparse.ArgumentTypeError(
            f"Plugin '{value}' must be in 'ID=VERSION' format"
        )
    return PluginReference(id=plugin_id, version=version.strip())


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Minecraft server profile generator")
    parser.add_argument(
        "--projects-root",
        type=Path,
        help=(
            "Directory holding one sub-directory per project. "
            "Defaults to CRAFTPROFILE_PROJECTS_ROOT or ./projects."
        ),
    )
    parser.add_argument(
        "--profile-path",
        type=str,
        help="Profile location inside each project (default: profiles/base.yml).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    show = subparsers.add_parser(
        "show", help="Print the editable fields read from the current profile."
    )
    show.add_argument("project_id", help="Identifier of the project to inspect.")

    generate = subparsers.add_parser(
        "generate", help="Generate a profile, optionally writing it back."
    )
    generate.add_argument("project_id", help="Identifier of the project to edit.")
    generate.add_argument("--world-mode", help="World mode (default: generated).")
    generate.add_argument("--world-name", help="World name (default: world).")
    generate.add_argument("--seed", help="World seed. Pass an empty string to clear.")
    generate.add_argument("--motd", help="Message of the day for server.properties.")
    generate.add_argument("--max-players", help="Maximum number of players.")
    generate.add_argument("--view-distance", help="View distance in chunks.")
    generate.add_argument(
        "--online-mode",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Authenticate players against the account servers.",
    )
    generate.add_argument(
        "--enforce-secure-profile",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Require players to have a signed chat profile.",
    )
    generate.add_argument(
        "--target-tick-distance", help="chunk-system.target-tick-distance value."
    )
    generate.add_argument(
        "--no-server-properties",
        action="store_true",
        help="Leave server.properties out of the profile.",
    )
    generate.add_argument(
        "--no-paper-global",
        action="store_true",
        help="Leave config/paper-global.yml out of the profile.",
    )
    generate.add_argument(
        "--plugin",
        dest="plugins",
        action="append",
        type=_parse_plugin_option,
        metavar="ID=VERSION",
        help="Add or update a plugin entry. May be supplied multiple times.",
    )
    generate.add_argument(
        "--remove-plugin",
        dest="removed_plugins",
        action="append",
        metavar="ID",
        help="Remove a plugin entry. May be supplied multiple times.",
    )
    generate.add_argument(
        "--write",
        action="store_true",
        help="Merge the generated profile into the stored one and save it.",
    )
    return parser.parse_args(argv)


def apply_edits(state: ProfileFormState, args: argparse.Namespace) -> None:
    """Apply the ``generate`` command-line edits to ``state``."""

    if args.world_mode is not None:
        state.world.mode = args.world_mode
    if args.world_name is not None:
        state.world.name = args.world_name
    if args.seed is not None:
        state.world.seed = args.seed

    server = state.server_properties
    if args.motd is not None:
        server.motd = args.motd
    if args.max_players is not None:
        server.max_players = args.max_players
    if args.view_distance is not None:
        server.view_distance = args.view_distance
    if args.online_mode is not None:
        server.online_mode = args.online_mode
    if args.enforce_secure_profile is not None:
        server.enforce_secure_profile = args.enforce_secure_profile
    if args.no_server_properties:
        server.include = False

    if args.target_tick_distance is not None:
        state.engine_global.target_tick_distance = args.target_tick_distance
    if args.no_paper_global:
        state.engine_global.include = False

    removed = {plugin_id.strip() for plugin_id in args.removed_plugins or ()}
    plugins = [plugin for plugin in state.plugins if plugin.id not in removed]
    for update in args.plugins or ():
        plugins = [plugin for plugin in plugins if plugin.id != update.id]
        plugins.append(update)
    state.plugins = plugins


def main(argv: Sequence[str] | None = None) -> None:
    """Run the profile command-line interface."""

    args = _parse_args(argv)
    try:
        settings = ProfileSettings.from_env()
    except ValueError as exc:
        print(f"Invalid configuration: {exc}")
        raise SystemExit(2) from exc
    settings.configure_logging()

    service = FileProfileService(
        args.projects_root or settings.projects_root,
        profile_path=args.profile_path or settings.profile_path,
    )
    editor = ProfileEditor(service, args.project_id, max_workers=settings.fetch_workers)

    try:
        state = editor.load()
    except KeyError as exc:
        print(f"Unknown project '{args.project_id}'.")
        raise SystemExit(2) from exc
    except ProfileParseError as exc:
        print(f"{PARSE_FAILURE_MESSAGE} ({exc})")
        raise SystemExit(2) from exc
    except ValueError as exc:
        print(f"Failed to load project '{args.project_id}': {exc}")
        raise SystemExit(2) from exc
    if state is None:
        raise SystemExit(2)

    if args.command == "show":
        print(json.dumps(state.to_payload(), indent=2))
        return

    apply_edits(state, args)
    preview = editor.preview()
    if preview is None:
        print(f"Profile preview unavailable: {editor.preview_error}")
        raise SystemExit(2)
    print(preview, end="")

    if args.write:
        try:
            result = editor.save()
        except ProfileSaveError as exc:
            print(f"Failed to save profile: {exc}")
            raise SystemExit(2) from exc
        print(f"Saved profile to {result.path}")


if __name__ == "__main__":  # pragma: no cover - manual invocation
    main()
