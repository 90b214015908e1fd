#!/usr/bin/env python3
"""
Article History CLI - Command line interface for a document's version history.

The versions of one document are kept in a JSON file holding the list of
serialized versions, in no particular order.

Usage:
    article-history init --file=FILE [--text=TEXT | --text-file=PATH]
    article-history commit --file=FILE (--text=TEXT | --text-file=PATH) [--parent=ID]
    article-history main-branch --file=FILE [--format=FORMAT]
    article-history branch --file=FILE --version=ID [--format=FORMAT]
    article-history leaves --file=FILE
    article-history show --file=FILE [--version=ID]
    article-history config show [--section=SECTION]
    article-history config validate
    article-history version
    article-history --help

Commands:
    init                Create a new history file, optionally with a first version
    commit              Record a new version of the text
    main-branch         List the versions of the main branch
    branch              List the versions from the root to a given version
    leaves              List the tips of every divergent branch
    show                Print the text at the main branch tip or at a version
    config              Show or validate configuration
    version             Show version information

Options:
    -h --help           Show this help message
    --file=FILE         History file path
    --text=TEXT         Text of the new version
    --text-file=PATH    Read the text of the new version from a file
    --parent=ID         Parent version [default: main branch tip]
    --version=ID        Version ID
    --format=FORMAT     Output format (text, json) [default: text]
    --section=SECTION   Configuration section
"""

import os
import sys
import json
import yaml
import logging
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from history_core import __version__
from history_core.config.config_manager import ConfigValidationError, get_config
from history_core.errors import VersionError
from history_core.model.version import Version, new_version
from history_core.monitoring.structured_logger import LoggingContext, configure_logging
from history_core.versioning.version_manager import VersionManager

logger = logging.getLogger(__name__)


class CLIError(Exception):
    """Raised for invalid command line usage."""

    pass


def _format_date(date: int) -> str:
    return datetime.fromtimestamp(date / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


class HistoryCLI:
    """Article History command line interface."""

    def __init__(self):
        self.config_manager = get_config()

    def load_manager(self, file: str) -> VersionManager:
        """Load the version manager from a history file."""
        path = Path(file)
        if not path.exists():
            raise CLIError(f"History file not found: {file}")

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        versions = [Version.from_dict(item) for item in data]
        logger.info(f"Loaded {len(versions)} versions from {file}")
        return VersionManager(versions)

    def save_manager(self, manager: VersionManager, file: str):
        """Write every version of the manager to a history file."""
        data = [version.to_dict() for version in manager.get_all_versions()]
        with open(file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        logger.info(f"Saved {len(data)} versions to {file}")

    def init_command(self, file: str, text: Optional[str] = None):
        """Create a new history file."""
        if Path(file).exists():
            raise CLIError(f"History file already exists: {file}")

        manager = VersionManager()
        if text is not None:
            manager.add_version(new_version("", text))
        self.save_manager(manager, file)

        print(f"✅ History created: {file}")
        if manager.last_version:
            print(f"📝 Root version: {manager.last_version}")

    def commit_command(self, file: str, text: str, parent: Optional[str] = None):
        """Record a new version of the text."""
        manager = self.load_manager(file)
        parent = parent or manager.last_version
        old_text = manager.compile_text(parent) if parent else ""

        if old_text == text:
            print("ℹ️  Text unchanged, nothing to commit")
            return

        version = new_version(old_text, text, parent)
        manager.add_version(version)
        self.save_manager(manager, file)

        print(f"✅ Committed version {version.id}")
        if parent:
            print(f"🔗 Parent: {parent}")
        if manager.last_version != version.id:
            print(f"🌿 Main branch tip remains {manager.last_version}")

    def branch_command(self, file: str, version_id: Optional[str] = None, format: str = "text"):
        """List the versions of the main branch or of the branch ending at a version."""
        manager = self.load_manager(file)
        if version_id:
            branch = manager.get_branch(version_id)
            title = f"Branch of {version_id}"
        else:
            branch = manager.get_main_branch()
            title = "Main branch"

        if format == "json":
            print(json.dumps([self._describe(version) for version in branch], indent=2))
            return

        print(f"📜 {title} ({len(branch)} versions)")
        print("=" * 50)
        for version in branch:
            print(
                f"{version.id}  {_format_date(version.date)}  "
                f"parent={version.parent or '-'}  patches={len(version.patch)}"
            )

    def leaves_command(self, file: str):
        """List the tips of every divergent branch."""
        manager = self.load_manager(file)
        print("🌿 Branch tips")
        print("=" * 50)
        for leaf in manager.get_leaves():
            depth = len(manager.get_branch(leaf))
            marker = " (main)" if leaf == manager.last_version else ""
            print(f"{leaf}  versions={depth}{marker}")

    def show_command(self, file: str, version_id: Optional[str] = None):
        """Print the text of a version."""
        manager = self.load_manager(file)
        print(manager.compile_text(version_id))

    def config_command(self, action: str, section: Optional[str] = None):
        """Show or validate configuration."""
        if action == "show":
            config = self.config_manager.to_dict()
            if section:
                if section not in config:
                    raise CLIError(f"Unknown configuration section: {section}")
                config = config[section]
                print(f"📋 Configuration - {section}")
            else:
                print("📋 Configuration")
            print("=" * 50)
            print(yaml.dump(config, indent=2, default_flow_style=False))
        elif action == "validate":
            self.config_manager.reload_configuration()
            print("✅ Configuration is valid")
        else:
            raise CLIError(f"Unknown config action: {action}")

    def version_command(self):
        """Show version information."""
        print(f"Article History v{__version__}")

    def _describe(self, version: Version) -> Dict[str, Any]:
        return {
            "id": version.id,
            "date": version.date,
            "parent": version.parent,
            "patches": len(version.patch),
        }


def parse_args(argv: Optional[List[str]] = None) -> Tuple[str, Dict[str, Any]]:
    """Parse command line arguments manually."""
    argv = sys.argv[1:] if argv is None else argv

    if len(argv) < 1:
        print(__doc__)
        sys.exit(1)

    command = argv[0]
    args: Dict[str, Any] = {}

    i = 1
    while i < len(argv):
        arg = argv[i]

        if arg.startswith("--"):
            if "=" in arg:
                key, value = arg[2:].split("=", 1)
                args[key] = value
            else:
                key = arg[2:]
                if i + 1 < len(argv) and not argv[i + 1].startswith("--"):
                    args[key] = argv[i + 1]
                    i += 1
                else:
                    args[key] = True
        else:
            args.setdefault("positional", []).append(arg)

        i += 1

    return command, args


def _read_text(args: Dict[str, Any], required: bool) -> Optional[str]:
    if "text-file" in args:
        with open(args["text-file"], "r", encoding="utf-8") as f:
            return f.read()
    if "text" in args:
        return args["text"]
    if required:
        raise CLIError("A text is required: pass --text or --text-file")
    return None


def _require_file(args: Dict[str, Any]) -> str:
    if "file" not in args:
        raise CLIError("This command requires --file")
    return args["file"]


def run(command: str, args: Dict[str, Any]):
    """Dispatch a parsed command."""
    cli = HistoryCLI()

    if command == "init":
        cli.init_command(_require_file(args), _read_text(args, required=False))

    elif command == "commit":
        cli.commit_command(_require_file(args), _read_text(args, required=True), args.get("parent"))

    elif command == "main-branch":
        cli.branch_command(_require_file(args), format=args.get("format", "text"))

    elif command == "branch":
        if "version" not in args:
            raise CLIError("Branch requires --version")
        cli.branch_command(_require_file(args), args["version"], args.get("format", "text"))

    elif command == "leaves":
        cli.leaves_command(_require_file(args))

    elif command == "show":
        cli.show_command(_require_file(args), args.get("version"))

    elif command == "config":
        positional = args.get("positional", [])
        if not positional:
            raise CLIError("Config command requires action (show, validate)")
        cli.config_command(positional[0], args.get("section"))

    elif command == "version":
        cli.version_command()

    elif command in ["--help", "-h", "help"]:
        print(__doc__)

    else:
        raise CLIError(f"Unknown command: {command}")


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    try:
        command, args = parse_args(argv)
        logging_config = get_config().config.logging
        configure_logging(
            logging_config.level.value, logging_config.json_format, logging_config.format
        )

        with LoggingContext():
            run(command, args)

    except CLIError as e:
        print(f"❌ {e}")
        print("Run 'article-history --help' for usage information")
        sys.exit(1)
    except VersionError as e:
        print(f"❌ {e.kind.value}: {e}")
        sys.exit(1)
    except ConfigValidationError as e:
        print(f"❌ {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\n🛑 Operation cancelled")
        sys.exit(1)
    except Exception as e:
        print(f"❌ Unexpected error: {e}")
        if os.getenv("DEBUG"):
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
