import json
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

BUILD_PATH = Path("build") / "contracts"


class ArtifactNotFound(FileNotFoundError):
    pass


@dataclass(frozen=True)
class ContractArtifact:
    name: str
    abi: List[dict]
    bytecode: str


def load_artifact(
    name: str, build_path: Union[str, Path] = BUILD_PATH
) -> ContractArtifact:
    path = Path(build_path) / f"{name}.json"
    if not path.is_file():
        raise ArtifactNotFound(f"{path} not found, run `brownie compile` first")
    with path.open() as f:
        data = json.load(f)
    return ContractArtifact(
        name=data.get("contractName", name),
        abi=data["abi"],
        bytecode=data.get("bytecode", ""),
    )
