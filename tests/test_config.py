"""Tests for the configuration module."""

from pathlib import Path

import pytest

from chanflow._cli.config import (
    ChanflowConfig,
    ConfigError,
    find_pyproject_toml,
    get_config,
    load_config,
)
from chanflow._model import DEFAULT_TYPE
from chanflow._typeexpr import Compound, TypeName


class TestFindPyprojectToml:
    """Tests for find_pyproject_toml function."""

    def test_finds_in_current_directory(self, tmp_path: Path) -> None:
        """Should find pyproject.toml in current directory."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[project]\nname = 'test'\n")

        result = find_pyproject_toml(tmp_path)

        assert result == pyproject

    def test_finds_in_parent_directory(self, tmp_path: Path) -> None:
        """Should find pyproject.toml in parent directory."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[project]\nname = 'test'\n")

        subdir = tmp_path / "graphs" / "nested"
        subdir.mkdir(parents=True)

        result = find_pyproject_toml(subdir)

        assert result == pyproject

    def test_returns_none_when_not_found(self, tmp_path: Path) -> None:
        """Should return None when no pyproject.toml is found."""
        result = find_pyproject_toml(tmp_path)

        assert result is None


class TestLoadConfigDefaultType:
    """Tests for the default-type setting."""

    def test_default_type_named(self, tmp_path: Path) -> None:
        """Should parse a named default type."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            """
[tool.chanflow]
default-type = "any"
""",
        )

        config = load_config(pyproject)

        assert config.default_type == TypeName("any")
        assert config.project_root == tmp_path

    def test_default_type_compound(self, tmp_path: Path) -> None:
        """Should accept any concrete type expression."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            """
[tool.chanflow]
default-type = "*struct{}"
""",
        )

        config = load_config(pyproject)

        assert config.default_type == Compound("*", (TypeName("struct{}"),))

    def test_default_type_with_parameter_raises_error(self, tmp_path: Path) -> None:
        """Should reject a default type that is itself generic."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            """
[tool.chanflow]
default-type = "[]$T"
""",
        )

        with pytest.raises(ConfigError, match="must be a concrete type"):
            load_config(pyproject)

    def test_default_type_bad_syntax_raises_error(self, tmp_path: Path) -> None:
        """Should raise ConfigError when the type cannot be parsed."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            """
[tool.chanflow]
default-type = "map[int"
""",
        )

        with pytest.raises(ConfigError, match="Invalid type"):
            load_config(pyproject)

    def test_default_type_not_string_raises_error(self, tmp_path: Path) -> None:
        """Should raise ConfigError when default-type is not a string."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            """
[tool.chanflow]
default-type = 1
""",
        )

        with pytest.raises(ConfigError, match="expected string"):
            load_config(pyproject)


class TestLoadConfigGraph:
    """Tests for the graph path setting."""

    def test_relative_graph_path(self, tmp_path: Path) -> None:
        """Should resolve the graph path against the project root."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            """
[tool.chanflow]
graph = "graphs/main.json"
""",
        )

        config = load_config(pyproject)

        assert config.graph == tmp_path / "graphs/main.json"

    def test_absolute_graph_path(self, tmp_path: Path) -> None:
        """Should keep an absolute graph path as is."""
        target = tmp_path / "elsewhere" / "main.json"
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(f'[tool.chanflow]\ngraph = "{target.as_posix()}"\n')

        config = load_config(pyproject)

        assert config.graph == target

    def test_invalid_graph_type_raises_error(self, tmp_path: Path) -> None:
        """Should raise ConfigError when graph is not a string."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            """
[tool.chanflow]
graph = ["a.json"]
""",
        )

        with pytest.raises(ConfigError, match="expected string path"):
            load_config(pyproject)


class TestLoadConfigEmptySection:
    """Tests for empty or missing configuration."""

    def test_no_tool_chanflow_section(self, tmp_path: Path) -> None:
        """Should return default config when no [tool.chanflow] section."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            """
[project]
name = "test"
""",
        )

        config = load_config(pyproject)

        assert config.default_type == DEFAULT_TYPE
        assert config.graph is None
        assert config.project_root == tmp_path

    def test_invalid_toml_raises_error(self, tmp_path: Path) -> None:
        """Should raise ConfigError for invalid TOML."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("invalid toml [[[")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(pyproject)

    def test_get_config_walks_up_from_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should find the configuration from a nested working directory."""
        (tmp_path / "pyproject.toml").write_text('[tool.chanflow]\ndefault-type = "any"\n')
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)

        config = get_config()

        assert config.default_type == TypeName("any")


class TestChanflowConfigDataclass:
    """Tests for the ChanflowConfig dataclass."""

    def test_default_values(self) -> None:
        config = ChanflowConfig()

        assert config.default_type == TypeName("interface{}")
        assert config.graph is None
        assert config.project_root is None

    def test_frozen(self) -> None:
        config = ChanflowConfig()

        with pytest.raises(AttributeError):
            config.graph = Path("x.json")  # type: ignore[misc]
