from pathlib import Path

import pytest


class FilesFixture:
    """A fixture providing access to sample documents."""

    def __init__(self, directory: str):
        self._base_path = Path(__file__).parent.parent
        self.directory = self._base_path / "files" / directory

    def sample_data(self, filename: str) -> bytes:
        return self.sample_path(filename).read_bytes()

    def sample_text(self, filename: str) -> str:
        return self.sample_path(filename).read_text(encoding="utf-8")

    def sample_path(self, filename: str) -> Path:
        return self.directory / filename


class DataciteFilesFixture(FilesFixture):
    """DataCite resource documents, one per schema kernel."""

    def __init__(self) -> None:
        super().__init__("datacite")


@pytest.fixture()
def datacite_files_fixture() -> DataciteFilesFixture:
    return DataciteFilesFixture()


class CrossciteFilesFixture(FilesFixture):
    def __init__(self) -> None:
        super().__init__("crosscite")


@pytest.fixture()
def crosscite_files_fixture() -> CrossciteFilesFixture:
    return CrossciteFilesFixture()


class BibtexFilesFixture(FilesFixture):
    def __init__(self) -> None:
        super().__init__("bibtex")


@pytest.fixture()
def bibtex_files_fixture() -> BibtexFilesFixture:
    return BibtexFilesFixture()


class RegistryFilesFixture(FilesFixture):
    """Registry lookup results, as JSON."""

    def __init__(self) -> None:
        super().__init__("registry")


@pytest.fixture()
def registry_files_fixture() -> RegistryFilesFixture:
    return RegistryFilesFixture()
