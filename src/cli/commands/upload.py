"""Upload CLI commands."""

from pathlib import Path

from src.upload.client import UploadClient
from src.upload.config import load_config
from src.upload.controller import UploadController
from src.upload.files import SelectedFile
from src.upload.tasks import DEFAULT_TASKS, PROCESSING_TASKS, catalog_order, parse_tasks


def _confirm(prompt: str) -> bool:
    try:
        answer = input(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def build_controller(args) -> UploadController:
    """Create a controller from stored config and command-line overrides."""
    config = load_config(Path(args.config) if args.config else None)
    if args.base_url:
        config.base_url = args.base_url
    if args.timeout is not None:
        if args.timeout <= 0:
            raise ValueError(f"Timeout must be positive, got {args.timeout}")
        config.timeout = args.timeout
    return UploadController(UploadClient(config))


def cmd_upload(args):
    """Upload one image and report the job it created."""
    image_path = Path(args.image)
    if not image_path.is_file():
        print(f"File not found: {image_path}")
        return 1

    try:
        wanted = parse_tasks(args.tasks) if args.tasks is not None else DEFAULT_TASKS
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    if not wanted:
        print("Error: at least one processing task is required")
        return 1

    try:
        controller = build_controller(args)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    with controller:
        picker = controller.input_unifier()
        if not picker.on_file_picked(SelectedFile.from_path(image_path, args.content_type)):
            print(f"Not an image: {image_path}")
            return 1

        # Reach the requested set one toggle at a time
        for task in PROCESSING_TASKS:
            if (task.id in wanted) != (task.id in controller.state.selected_tasks):
                controller.toggle_task(task.id)

        print(f"Uploading {image_path.name} with tasks: {', '.join(catalog_order(wanted))}")
        print(f"  Idempotency key: {controller.state.idempotency_key}")

        while True:
            state = controller.submit_and_wait()

            if state.status == "SUCCEEDED":
                print("✓ Upload successful")
                print(f"  Job ID: {state.result.job_id}")
                print(f"  Photo ID: {state.result.photo_id}")
                return 0

            print(f"✗ {state.result.message if state.result else 'Upload failed'}")
            if args.no_input or not _confirm("Retry with the same idempotency key?"):
                return 1


def cmd_list_tasks(args):
    """List available processing tasks."""
    for task in PROCESSING_TASKS:
        marker = "*" if task.id in DEFAULT_TASKS else " "
        print(f"{marker} {task.id:<10} {task.label:<10} {task.description}")
    print("\n* selected by default")
    return 0


def setup_upload_commands(subparsers):
    """Setup upload subcommands."""
    upload_parser = subparsers.add_parser("upload", help="Upload an image for processing")
    upload_parser.add_argument("image", help="Path to the image file")
    upload_parser.add_argument(
        "--tasks", help="Comma-separated processing tasks (default: RESIZE,THUMBNAIL)"
    )
    upload_parser.add_argument("--content-type", help="Override the content type guessed from the file name")
    upload_parser.add_argument("--base-url", help="Server base URL")
    upload_parser.add_argument("--timeout", type=float, help="Request timeout in seconds")
    upload_parser.add_argument("--config", help="Path to client config JSON")
    upload_parser.add_argument("--no-input", action="store_true", help="Never prompt to retry")
    upload_parser.set_defaults(func=cmd_upload)

    tasks_parser = subparsers.add_parser("tasks", help="List processing tasks")
    tasks_parser.set_defaults(func=cmd_list_tasks)
