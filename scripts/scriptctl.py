import argparse
import json
import sys

from dotenv import load_dotenv

from backend import config
from backend.core.errors import JobApiError
from backend.core.job_api import JobApiClient
from backend.core.reconciler import ScriptReconciler


def _confirm_from_terminal(message: str) -> bool:
    answer = input(f"{message} [y/N] ")
    return answer.strip().lower() in {"y", "yes"}


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


# --- Commands ---
def cmd_list(client: JobApiClient, args) -> int:
    scripts = client.list_scripts()
    print(f"[*] {len(scripts)} script(s)")
    for script in scripts:
        state = "Active" if script.status else "Inactive"
        print(f"  {script.script_id}  {script.file_name:<30} {state:<8} {', '.join(str(p) for p in script.param or [])}")
    return 0


def cmd_show(client: JobApiClient, args) -> int:
    detail = client.get_script(args.script_id)
    _print_json(detail.model_dump())
    return 0


def cmd_delete(client: JobApiClient, args) -> int:
    reconciler = ScriptReconciler(client, args.script_id)
    reconciler.load()
    confirm = (lambda _message: True) if args.yes else _confirm_from_terminal
    if not reconciler.delete(confirm):
        print("[*] Delete aborted.")
        return 1
    print("[*] Script deleted successfully!")
    return 0


def _apply_edits(reconciler: ScriptReconciler, args) -> None:
    if args.file_name is not None:
        reconciler.set_field("file_name", args.file_name)
    if args.description is not None:
        reconciler.set_field("description", args.description)
    if args.status is not None:
        reconciler.set_field("status", args.status == "active")

    for name in args.remove_param:
        names = [p.name for p in reconciler.parameters.items()]
        if name in names:
            reconciler.parameters.remove(names.index(name))
    for name in args.add_param:
        index = reconciler.parameters.add()
        reconciler.parameters.update(index, name, field="name")

    for tag in args.remove_tag:
        if tag in reconciler.tags.items():
            reconciler.tags.remove(reconciler.tags.items().index(tag))
    for tag in args.add_tag:
        reconciler.tags.add(tag)

    for runner in args.remove_runner:
        if runner in reconciler.runners.items():
            reconciler.runners.remove(reconciler.runners.items().index(runner))

    for runner in args.add_runner:
        reconciler.runners.add(runner)


def _save(reconciler: ScriptReconciler) -> int:
    result = reconciler.save()
    if not result.ok:
        print(f"[!] Failed to save script: {result.message}", file=sys.stderr)
        return 1
    print(f"[*] Script saved successfully! (id: {reconciler.script_id or 'unknown'})")
    return 0


def cmd_edit(client: JobApiClient, args) -> int:
    reconciler = ScriptReconciler(client, args.script_id)
    reconciler.load()
    reconciler.begin_edit()
    _apply_edits(reconciler, args)
    return _save(reconciler)


def cmd_create(client: JobApiClient, args) -> int:
    reconciler = ScriptReconciler(client)
    reconciler.begin_edit()
    _apply_edits(reconciler, args)
    return _save(reconciler)


def _add_edit_options(parser: argparse.ArgumentParser, require_file_name: bool = False) -> None:
    parser.add_argument("--file-name", dest="file_name", required=require_file_name)
    parser.add_argument("--description")
    parser.add_argument("--status", choices=["active", "inactive"])
    parser.add_argument("--add-param", "--param", dest="add_param", action="append", default=[])
    parser.add_argument("--remove-param", dest="remove_param", action="append", default=[])
    parser.add_argument("--add-tag", "--tag", dest="add_tag", action="append", default=[])
    parser.add_argument("--remove-tag", dest="remove_tag", action="append", default=[])
    parser.add_argument("--add-runner", "--runner", dest="add_runner", action="append", default=[])
    parser.add_argument("--remove-runner", dest="remove_runner", action="append", default=[])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage scripts on the job execution API.")
    parser.add_argument("--base-url", default=None, help="Job API base URL (defaults to JOB_API_BASE_URL)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List scripts").set_defaults(handler=cmd_list)

    show = sub.add_parser("show", help="Show one script with its parameters")
    show.add_argument("script_id")
    show.set_defaults(handler=cmd_show)

    delete = sub.add_parser("delete", help="Delete a script")
    delete.add_argument("script_id")
    delete.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    delete.set_defaults(handler=cmd_delete)

    edit = sub.add_parser("edit", help="Edit a script")
    edit.add_argument("script_id")
    _add_edit_options(edit)
    edit.set_defaults(handler=cmd_edit)

    create = sub.add_parser("create", help="Create a script")
    _add_edit_options(create, require_file_name=True)
    create.set_defaults(handler=cmd_create)

    return parser


# --- Main ---
def main(argv=None, client: JobApiClient | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    client = client or JobApiClient(base_url=args.base_url or config.JOB_API_BASE_URL)

    try:
        return args.handler(client, args)
    except JobApiError as exc:
        print(f"[!] {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
