"""
Pytest configuration to ensure the project root is on sys.path for imports,
plus registry fixtures shared across test modules.
"""

import base64
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

SAMPLE_REGISTRY_YAML = """\
sigs:
  - name: storage
    sig_label: sig/storage
    sig_link: https://example.com/sigs/storage
    files:
      - file: [a.go, pkg/disk.go]
        owner:
          - gitee_id: alice
            name: Alice
            organization: Example
            email: alice@example.com
      - file: [a.go]
        owner:
          - gitee_id: carol
          - gitee_id: alice
            name: Alice Duplicate
    repos:
      - repo: [storage-engine, community]
        owner:
          - gitee_id: dave
  - name: network
    sig_label: sig/network
    sig_link: https://example.com/sigs/network
    files:
      - file: [net/conn.go]
        owner:
          - gitee_id: erin
    repos:
      - repo: [community]
        owner:
          - gitee_id: frank
"""


@pytest.fixture
def registry_yaml() -> str:
    return SAMPLE_REGISTRY_YAML


@pytest.fixture
def registry_content(registry_yaml: str) -> dict[str, str]:
    """Registry wrapped the way the Contents API returns it (base64, 60-column lines)."""
    encoded = base64.b64encode(registry_yaml.encode()).decode()
    wrapped = "\n".join(encoded[i : i + 60] for i in range(0, len(encoded), 60))
    return {"type": "file", "encoding": "base64", "content": wrapped}


@pytest.fixture
def registry(registry_yaml: str):
    from src.sigs.loaders.github_loader import parse_registry

    return parse_registry(registry_yaml)
