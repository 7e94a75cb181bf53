"""Processing task catalog offered for each upload."""

from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Literal, Tuple


TaskId = Literal["RESIZE", "THUMBNAIL", "WATERMARK"]


@dataclass(frozen=True)
class ProcessingTask:
    """A server-side processing step the user can request."""
    id: TaskId
    label: str
    description: str


# Catalog order is display order and wire order
PROCESSING_TASKS: Tuple[ProcessingTask, ...] = (
    ProcessingTask("RESIZE", "Resize", "Resize to 1920x1080"),
    ProcessingTask("THUMBNAIL", "Thumbnail", "Generate 200x200 thumbnail"),
    ProcessingTask("WATERMARK", "Watermark", "Apply watermark overlay"),
)

TASK_IDS: Tuple[str, ...] = tuple(task.id for task in PROCESSING_TASKS)

DEFAULT_TASKS: FrozenSet[str] = frozenset({"RESIZE", "THUMBNAIL"})


def catalog_order(task_ids: Iterable[str]) -> List[str]:
    """Return task ids sorted by catalog position, dropping duplicates."""
    wanted = set(task_ids)
    return [task_id for task_id in TASK_IDS if task_id in wanted]


def serialize_tasks(task_ids: Iterable[str]) -> str:
    """Serialize a task set for the upload query string.

    Identical sets always produce identical strings regardless of the
    order in which tasks were toggled.
    """
    return ",".join(catalog_order(task_ids))


def parse_tasks(value: str) -> FrozenSet[str]:
    """Parse a comma-separated task list.

    Raises:
        ValueError: If an id is not in the catalog.
    """
    parsed = set()
    for part in value.split(","):
        task_id = part.strip().upper()
        if not task_id:
            continue
        if task_id not in TASK_IDS:
            raise ValueError(f"Unknown processing task: {part.strip()}")
        parsed.add(task_id)
    return frozenset(parsed)


def toggle_task(task_ids: FrozenSet[str], task_id: str) -> FrozenSet[str]:
    """Flip membership of task_id in the set."""
    if task_id not in TASK_IDS:
        raise ValueError(f"Unknown processing task: {task_id}")
    if task_id in task_ids:
        return task_ids - {task_id}
    return task_ids | {task_id}
