"""Post-generation artifacts written next to a generated project.

Both helpers raise ``BestEffortError`` on failure; the controller logs and
ignores it because these files augment, but do not define, the project.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from jinja2 import TemplateError

from sqlscaffold.config import GenerationInfo
from sqlscaffold.errors import BestEffortError
from sqlscaffold.translator.renderer import TemplateRenderer
from sqlscaffold.utils import to_kebab_case

GEN_INFO_FILE = "docs/gen.info"

_TEMPLATE_DIR = Path(__file__).parent / "templates"


def configmap_path(service_name: str, output_path: str | Path) -> Path:
    return Path(output_path) / "deployments" / "kubernetes" / f"{service_name}-configmap.yml"


def generate_configmap(service_name: str, output_path: str | Path, namespace: str = "") -> Path:
    """Wrap ``configs/<service>.yml`` in a Kubernetes ConfigMap.

    The namespace defaults to the one declared in the generated deployment
    manifest, falling back to the kebab-cased service name.

    Raises:
        BestEffortError: If the config file or deployment manifest cannot be
            read, or the ConfigMap cannot be written.
    """
    root = Path(output_path)
    config_file = root / "configs" / f"{service_name}.yml"
    kebab = to_kebab_case(service_name)
    try:
        config_text = config_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise BestEffortError(f"cannot read {config_file}: {exc}") from exc

    if not namespace:
        namespace = _deployment_namespace(root, kebab) or kebab

    target = configmap_path(service_name, root)
    context = {
        "service": service_name,
        "namespace": namespace,
        "config_text": config_text.rstrip("\n"),
    }
    try:
        TemplateRenderer(_TEMPLATE_DIR).render_to_file("configmap.yml.j2", target, context)
    except TemplateError as exc:
        raise BestEffortError(f"cannot render {target.name}: {exc}") from exc
    except OSError as exc:
        raise BestEffortError(f"cannot write {target}: {exc}") from exc
    return target


def _deployment_namespace(root: Path, kebab: str) -> str:
    manifest = root / "deployments" / "kubernetes" / f"{kebab}-deployment.yml"
    if not manifest.is_file():
        return ""
    try:
        doc = yaml.safe_load(manifest.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise BestEffortError(f"cannot read {manifest}: {exc}") from exc
    try:
        namespace = doc["metadata"]["namespace"]
    except (KeyError, TypeError):
        return ""
    return str(namespace or "")


def save_gen_info(info: GenerationInfo, output_path: str | Path) -> Path:
    """Write the generation metadata record to ``docs/gen.info``.

    Raises:
        BestEffortError: If the file cannot be written.
    """
    target = Path(output_path) / GEN_INFO_FILE
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(info.model_dump_json(indent=2), encoding="utf-8")
    except OSError as exc:
        raise BestEffortError(f"cannot write {target}: {exc}") from exc
    return target


def load_gen_info(output_path: str | Path) -> GenerationInfo:
    """Read back the record written by ``save_gen_info``."""
    raw = (Path(output_path) / GEN_INFO_FILE).read_text(encoding="utf-8")
    return GenerationInfo.model_validate_json(raw)
