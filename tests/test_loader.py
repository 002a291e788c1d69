"""Tests for loading source trees and bootstrapping their entry point."""

import logging

import pytest

import classloader
import loadertest
from classloader import LoaderState, ObjectKind
from loadertest import member


ZOO = {
    "main.py": """
        Game = Singleton()
        Import("zoo.Dog")

        def Main(self):
            calls.append("main")
            rex = Dog.New()
            return rex.Speak() + " " + str(rex.Legs())

        Game.Main = Main
        return Game
    """,
    "zoo/animal.py": """
        Animal = Class()

        def Speak(self):
            return "..."

        def Legs(self):
            return 4

        Animal.Speak = Speak
        Animal.Legs = Legs
        return Animal
    """,
    "zoo/sh_dog.py": """
        Dog = Class().Extends(Animal)

        def Speak(self):
            return "Woof"

        Dog.Speak = Speak
        return Dog
    """,
}


def test_bootstrap_runs_main(tmp_path):
    calls = []
    loadertest.write_tree(tmp_path, ZOO)
    result = classloader.bootstrap(str(tmp_path), "Main", host_globals={"calls": calls})
    assert result == "Woof 4"
    assert calls == ["main"]


def test_loader_states(tmp_path):
    loader = loadertest.make_loader(tmp_path, ZOO, host_globals={"calls": []})
    assert loader.state is LoaderState.IDLE
    loader.load()
    assert loader.state is LoaderState.FINALIZING
    loader.invoke()
    assert loader.state is LoaderState.INVOKING
    loader.close()
    assert loader.state is LoaderState.DONE
    assert len(loader.context.registry) == 0


def test_inheritance_through_files(tmp_path):
    loader = loadertest.load_tree(tmp_path, ZOO)
    animal = member(loader, "zoo.Animal")
    dog = member(loader, "zoo.Dog")

    assert dog.__super__ is animal
    assert dog.New().Legs() == 4
    assert dog.New().Speak() == "Woof"
    assert animal.New().Speak() == "..."


def test_default_extends_removed(tmp_path):
    loader = loadertest.load_tree(tmp_path, ZOO)
    names = dict(classloader.public_members(member(loader, "zoo.Animal")))
    assert "Extends" not in names
    assert "New" in names


def test_metadata_stamped(tmp_path):
    loader = loadertest.load_tree(tmp_path, ZOO)
    dog = member(loader, "zoo.Dog")
    assert dog.__name__ == "Dog"
    assert dog.__package__ == "zoo"
    assert dog.__kind__ is ObjectKind.CLASS


def test_forward_reference(tmp_path):
    loader = loadertest.load_tree(tmp_path, {
        "world/a_first.py": """
            A = Singleton()
            A.partner = BSecond
            A.partner_kind = BSecond.__kind__.value
            return A
        """,
        "world/b_second.py": """
            B = Singleton()
            B.value = 5
            return B
        """,
    })
    first = member(loader, "world.AFirst")
    second = member(loader, "world.BSecond")
    assert first.partner_kind == "Placeholder"
    assert first.partner is second
    assert first.partner.value == 5


def test_string_superclass(tmp_path):
    loader = loadertest.load_tree(tmp_path, {
        "zoo/cat.py": """
            Cat = Extends(Class(), "base.Animal")
            return Cat
        """,
        "base/animal.py": """
            Animal = Class()
            Animal.legs = 4
            return Animal
        """,
    })
    cat = member(loader, "zoo.Cat")
    assert cat.__super__ is member(loader, "base.Animal")
    assert cat.New().legs == 4


def test_enum_file(tmp_path):
    loader = loadertest.load_tree(tmp_path, {
        "paint/color.py": """
            Color = Enum()
            Color.RED = 1
            Color.GREEN = 2
            Color.MIXED = Color.RED + Color.GREEN
            return Color
        """,
    })
    color = member(loader, "paint.Color")
    assert color.RED.GetValue() == 1
    assert color.MIXED.GetValue() == 3
    assert color.RED < color.GREEN
    assert color.RED + color.GREEN == 3
    assert [v.GetName() for v in color.GetValues()] == ["RED", "GREEN", "MIXED"]


def test_empty_packages_removed(tmp_path):
    loader = loadertest.load_tree(tmp_path, {
        "game/ui/hud.py": """
            return Singleton()
        """,
    })
    assert loader.context.registry.names() == ["game.ui"]


def test_helpers_detached_after_load(tmp_path):
    loader = loadertest.load_tree(tmp_path, {
        "thing.py": """
            T = Singleton()

            def MakeClass(self):
                return Class()

            def HostName(self):
                return host_name

            T.MakeClass = MakeClass
            T.HostName = HostName
            return T
        """,
    }, host_globals={"host_name": "server"})
    thing = member(loader, "Thing")
    assert thing.HostName() == "server"
    with pytest.raises(NameError):
        thing.MakeClass()


def test_invalid_object_result(tmp_path):
    loader = loadertest.make_loader(tmp_path, {
        "game/broken.py": """
            x = 1
        """,
    })
    with pytest.raises(classloader.InvalidObjectError) as info:
        loader.load()
    assert info.value.location == "game.Broken"
    assert loader.state is LoaderState.FAILED


def test_non_object_result(tmp_path):
    loader = loadertest.make_loader(tmp_path, {
        "broken.py": """
            return {"RED": 1}
        """,
    })
    with pytest.raises(classloader.InvalidObjectError):
        loader.load()


def test_constructor_twice(tmp_path):
    loader = loadertest.make_loader(tmp_path, {
        "both.py": """
            Class()
            return Singleton()
        """,
    })
    with pytest.raises(classloader.InvalidObjectError):
        loader.load()


def test_constructor_outside_file():
    context = classloader.LoaderContext()
    with pytest.raises(classloader.ResolutionError):
        context.environment.mapping["Class"]()


def test_file_errors_propagate(tmp_path):
    loader = loadertest.make_loader(tmp_path, {
        "boom.py": """
            raise RuntimeError("boom")
        """,
    })
    with pytest.raises(RuntimeError, match="boom"):
        loader.load()
    assert loader.state is LoaderState.FAILED


def test_duplicate_object_names_warn(tmp_path, caplog):
    with caplog.at_level(logging.WARNING, logger="classloader"):
        loader = loadertest.load_tree(tmp_path, {
            "ui/cl_hud.py": """
                return Singleton()
            """,
            "ui/sv_hud.py": """
                return Singleton()
            """,
        })
    assert "both define Hud" in caplog.text
    assert member(loader, "ui.Hud").__kind__ is ObjectKind.SINGLETON


ENTRY_TREE = {
    "app/start.py": """
        S = Singleton()

        def Main(self):
            calls.append("start")

        S.Main = Main
        return S
    """,
    "app/widget.py": """
        W = Class()

        def Main(self):
            calls.append("widget")

        W.Main = Main
        return W
    """,
    "app/idle.py": """
        return Singleton()
    """,
}


def test_entry_point_must_be_singleton(tmp_path):
    calls = []
    loadertest.write_tree(tmp_path, ENTRY_TREE)
    with pytest.raises(classloader.InvalidEntryPointError):
        classloader.bootstrap(str(tmp_path), "app.Widget", host_globals={"calls": calls})
    assert calls == []


def test_entry_point_missing(tmp_path):
    loadertest.write_tree(tmp_path, ENTRY_TREE)
    with pytest.raises(classloader.MissingEntryPointError):
        classloader.bootstrap(str(tmp_path), "app.Nothing", host_globals={"calls": []})


def test_entry_point_without_main(tmp_path):
    loadertest.write_tree(tmp_path, ENTRY_TREE)
    with pytest.raises(classloader.NoMainMethodError):
        classloader.bootstrap(str(tmp_path), "app.Idle", host_globals={"calls": []})


def test_entry_point_wildcard(tmp_path):
    loadertest.write_tree(tmp_path, ENTRY_TREE)
    with pytest.raises(classloader.InvalidEntryPointError):
        classloader.bootstrap(str(tmp_path), "app.*", host_globals={"calls": []})


def test_entry_point_errors_share_base():
    for error in (classloader.MissingEntryPointError,
                  classloader.InvalidEntryPointError,
                  classloader.NoMainMethodError):
        assert issubclass(error, classloader.EntryPointError)
        assert issubclass(error, classloader.LoaderError)


def test_bootstrap_argument_checks(tmp_path):
    with pytest.raises(classloader.InvalidArgumentError):
        classloader.bootstrap(tmp_path, "Main")
    with pytest.raises(classloader.InvalidArgumentError):
        classloader.bootstrap(str(tmp_path), None)


def test_second_bootstrap_starts_clean(tmp_path):
    first = tmp_path / "first"
    second = tmp_path / "second"
    loadertest.write_tree(first, {
        "zoo/animal.py": """
            return Class()
        """,
        "main.py": """
            M = Singleton()
            M.Main = lambda self: Import("zoo.Animal").__kind__.value
            return M
        """,
    })
    loadertest.write_tree(second, {
        "main.py": """
            M = Singleton()
            Animal = Import("zoo.Animal")

            def Main(self):
                return Animal.__kind__.value

            M.Main = Main
            return M
        """,
    })
    assert classloader.bootstrap(str(second), "Main") == "Placeholder"
    with pytest.raises(NameError):
        classloader.bootstrap(str(first), "Main")
    assert classloader.bootstrap(str(second), "Main") == "Placeholder"
