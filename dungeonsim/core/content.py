import json
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel

from dungeonsim.core.errors import CatalogLoadError, report_data_integrity
from dungeonsim.core.logging import log_error, log_info

if TYPE_CHECKING:
    from dungeonsim.crafting.crafting_manager import CraftingManager
    from dungeonsim.items.item_catalog import ItemCatalog
    from dungeonsim.mobs.mob_catalog import MobCatalog

ModelT = TypeVar("ModelT", bound=BaseModel)

DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class ContentRepository:
    """
    One-stop registry for the catalogs loaded at startup.
    """

    items: "ItemCatalog"
    mobs: "MobCatalog"
    crafting: "CraftingManager"

    def __init__(self, data_dir: Path | None = None) -> None:
        """
        Initialize the ContentRepository.

        Args:
            data_dir (Path | None):
                The directory containing the catalog files. Defaults to the
                catalogs bundled with the package.

        """
        self.data_dir = Path(data_dir) if data_dir else DEFAULT_DATA_DIR
        self.reload(self.data_dir)

    def reload(self, root: Path) -> None:
        """
        (Re)load every catalog from disk.

        Args:
            root (Path):
                The directory containing items.json, mobs.json and recipes.json.

        Raises:
            CatalogLoadError: If a file is missing or malformed.

        """
        from dungeonsim.crafting.crafting_manager import CraftingManager
        from dungeonsim.items.item_catalog import ItemCatalog
        from dungeonsim.mobs.mob_catalog import MobCatalog

        self.items = load_json_file(root / "items.json", ItemCatalog.from_dict, "items")
        self.mobs = load_json_file(
            root / "mobs.json",
            lambda data: MobCatalog.from_dict(data, known_items=set(self.items.items)),
            "mobs",
        )
        self.crafting = load_json_file(
            root / "recipes.json",
            lambda data: CraftingManager.from_dict(data, item_catalog=self.items),
            "recipes",
        )

    def get_stats(self) -> dict[str, dict[str, Any]]:
        return {
            "items": self.items.get_stats(),
            "mobs": self.mobs.get_stats(),
            "crafting": self.crafting.get_stats(),
        }


def load_json_file(
    filepath: Path,
    loader_func: Callable[[dict[str, Any]], Any],
    description: str,
) -> Any:
    """Helper to load and validate JSON catalog files"""
    log_info(f"Loading {description}", {"path": filepath})
    try:
        if not filepath.exists():
            raise FileNotFoundError(f"File not found: {filepath}")
        if not filepath.is_file():
            raise ValueError(f"Not a file: {filepath}")
        with open(filepath, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, FileNotFoundError, ValueError) as e:
        log_error(f"Failed to load {description}", {"path": filepath, "error": str(e)})
        raise CatalogLoadError(f"File {filepath} raised an error: {e}") from e
    if not isinstance(data, dict):
        raise CatalogLoadError(
            f"Expected an object in {filepath}, got {type(data).__name__}"
        )
    return loader_func(data)


def parse_records(
    data: Mapping[str, Any] | None,
    model: type[ModelT],
    description: str,
    with_id: bool = False,
) -> dict[str, ModelT]:
    """
    Validates every record of an id-keyed catalog section.

    A record that fails validation is reported as a data-integrity problem
    and skipped.

    Args:
        data (Mapping[str, Any] | None):
            The section, mapping ids to raw records.
        model (type[ModelT]):
            The pydantic model each record is validated against.
        description (str):
            Name of the section, used in warnings.
        with_id (bool):
            Whether the mapping key is injected into the record as ``id``.

    Returns:
        dict[str, ModelT]:
            The valid records, keyed by id, in file order.

    Raises:
        CatalogLoadError: If the section is not a mapping.

    """
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise CatalogLoadError(
            f"Section '{description}' must be an object, got {type(data).__name__}"
        )
    records: dict[str, ModelT] = {}
    for record_id, raw in data.items():
        if not isinstance(raw, Mapping):
            report_data_integrity(
                f"Skipping {description} entry '{record_id}': not an object.",
                {"section": description, "id": record_id},
            )
            continue
        payload = {**raw, "id": record_id} if with_id else dict(raw)
        try:
            records[record_id] = model.model_validate(payload)
        except (ValueError, AssertionError) as e:
            report_data_integrity(
                f"Skipping invalid {description} entry '{record_id}'.",
                {"section": description, "id": record_id, "error": str(e)},
            )
    return records
