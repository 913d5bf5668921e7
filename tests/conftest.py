"""
Pytest configuration and shared fixtures for usage pattern tests.
"""

from __future__ import annotations

import json
import tempfile
from pathlib import Path
from typing import Generator

import pytest
import yaml


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config(temp_dir: Path) -> Path:
    """Create a sample configuration file."""
    config_path = temp_dir / "patterns.yaml"
    config_data = {
        "logging": {
            "level": "debug",
        },
        "api": {
            "port": 9090,
        },
        "output": {
            "indent": 4,
        },
    }
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


@pytest.fixture
def n_times_document() -> dict:
    """IDS contract offer limiting usage to five times."""
    return {
        "@context": {
            "ids": "https://w3id.org/idsa/core/",
            "idsc": "https://w3id.org/idsa/code/",
        },
        "@type": "ids:ContractOffer",
        "@id": "https://w3id.org/idsa/autogen/contractOffer/6f1b0c1e",
        "ids:permission": [
            {
                "@type": "ids:Permission",
                "@id": "https://w3id.org/idsa/autogen/permission/a2d4",
                "ids:title": [{"@value": "Example Usage Policy", "@type": "xsd:string"}],
                "ids:action": [{"@id": "idsc:USE"}],
                "ids:constraint": [
                    {
                        "@type": "ids:Constraint",
                        "ids:leftOperand": {"@id": "idsc:COUNT"},
                        "ids:operator": {"@id": "idsc:LTEQ"},
                        "ids:rightOperand": {"@value": "5", "@type": "xsd:double"},
                        "ids:pipEndpoint": {
                            "@id": "https://localhost:8080/admin/api/resources/"
                        },
                    }
                ],
            }
        ],
    }


@pytest.fixture
def notification_document() -> dict:
    """Contract requiring a notification, written with full IRIs."""
    return {
        "@type": "https://w3id.org/idsa/core/ContractOffer",
        "ids:permission": [
            {
                "ids:action": [{"@id": "https://w3id.org/idsa/code/USE"}],
                "ids:postDuty": [
                    {
                        "ids:action": [{"@id": "https://w3id.org/idsa/code/NOTIFY"}],
                        "ids:constraint": [
                            {
                                "ids:leftOperand": {"@id": "https://w3id.org/idsa/code/ENDPOINT"},
                                "ids:operator": {"@id": "https://w3id.org/idsa/code/DEFINES_AS"},
                                "ids:rightOperand": {
                                    "@value": "https://localhost:8000/api/ids/data",
                                    "@type": "http://www.w3.org/2001/XMLSchema#anyURI",
                                },
                            }
                        ],
                    }
                ],
            }
        ],
    }


@pytest.fixture
def n_times_file(temp_dir: Path, n_times_document: dict) -> Path:
    """Write the n-times contract to a JSON-LD file."""
    path = temp_dir / "n_times.jsonld"
    path.write_text(json.dumps(n_times_document, indent=2))
    return path
