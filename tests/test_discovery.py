"""Tests for pubspec discovery."""

from dartgen import discovery
from dartgen.config import ProjectConfig
from dartgen.discovery import find_project, find_pubspec, resolve_project


def make_package(root, pubspec):
    (root / "lib" / "src").mkdir(parents=True)
    (root / "pubspec.yaml").write_text(pubspec, encoding="utf-8")
    source = root / "lib" / "src" / "point.dart"
    source.write_text("class Point {}\n", encoding="utf-8")
    return source


class TestFindProject:
    def test_dart_package(self, tmp_path):
        source = make_package(tmp_path, "name: geometry\ndependencies:\n  meta: ^1.9.0\n")
        info = find_project(str(source))
        assert info.package_name == "geometry"
        assert not info.is_flutter
        assert info.root == str(tmp_path)

    def test_flutter_package(self, tmp_path):
        source = make_package(
            tmp_path,
            "name: app\ndependencies:\n  flutter:\n    sdk: flutter\n",
        )
        info = find_project(str(source))
        assert info.package_name == "app"
        assert info.is_flutter

    def test_pubspec_without_name(self, tmp_path):
        pkg = tmp_path / "my-pkg"
        pkg.mkdir()
        source = make_package(pkg, "dependencies: {}\n")
        assert find_project(str(source)).package_name == "my_pkg"

    def test_no_pubspec(self, tmp_path, monkeypatch):
        source = tmp_path / "loose-files" / "a.dart"
        source.parent.mkdir()
        source.write_text("", encoding="utf-8")
        monkeypatch.setattr(discovery, "find_pubspec", lambda path: None)
        info = find_project(str(source))
        assert info.package_name == "loose_files"
        assert info.root is None
        assert not info.is_flutter

    def test_find_pubspec_walks_up(self, tmp_path):
        source = make_package(tmp_path, "name: geometry\n")
        assert find_pubspec(str(source)) == str(tmp_path / "pubspec.yaml")


class TestResolveProject:
    def test_overrides_win(self, tmp_path):
        source = make_package(tmp_path, "name: geometry\n")
        info = resolve_project(str(source), ProjectConfig(package_name="other", is_flutter=True))
        assert info.package_name == "other"
        assert info.is_flutter

    def test_unset_overrides_keep_discovered_values(self, tmp_path):
        source = make_package(tmp_path, "name: geometry\n")
        info = resolve_project(str(source), ProjectConfig())
        assert info.package_name == "geometry"
        assert not info.is_flutter
