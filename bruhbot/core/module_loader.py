import importlib.util
import inspect
import logging
import sys
from pathlib import Path
from typing import Any

import hikari

from ..commands.decorators import CommandDeclaration
from ..errors import DuplicateCommandError, ModuleLoadError
from ..modules.base import BotModule

logger = logging.getLogger(__name__)


class ModuleLoader:
    """Loads modules and keeps the name-keyed command table.

    Every command name and alias maps to the module that owns it and its
    declaration; that table is all the dispatcher ever looks at.
    """

    def __init__(self, bot: Any = None) -> None:
        self.bot = bot
        self.modules: dict[str, BotModule] = {}
        self.module_directories: list[Path] = []
        self._commands: dict[str, tuple[BotModule, CommandDeclaration]] = {}

    def add_module_directory(self, directory: str) -> None:
        path = Path(directory)
        if path.exists() and path.is_dir():
            self.module_directories.append(path)
            logger.info(f"Added module directory: {path}")
        else:
            logger.warning(f"Module directory does not exist: {path}")

    def discover_modules(self) -> list[str]:
        discovered = []

        for directory in self.module_directories:
            for module_path in sorted(directory.iterdir()):
                if module_path.is_dir() and not module_path.name.startswith("_"):
                    if (module_path / "__init__.py").exists():
                        discovered.append(module_path.name)

        logger.info(f"Discovered modules: {discovered}")
        return discovered

    def _import_module_package(self, module_name: str) -> Any:
        for directory in self.module_directories:
            module_path = directory / module_name
            if module_path.exists():
                spec = importlib.util.spec_from_file_location(
                    f"modules.{module_name}",
                    module_path / "__init__.py",
                    submodule_search_locations=[str(module_path)],
                )
                if spec and spec.loader:
                    package = importlib.util.module_from_spec(spec)
                    sys.modules[f"modules.{module_name}"] = package
                    spec.loader.exec_module(package)
                    return package

        raise ModuleLoadError(f"Module {module_name} not found")

    def _extract_module_class(self, package: Any) -> type[BotModule]:
        for _, obj in inspect.getmembers(package, inspect.isclass):
            if issubclass(obj, BotModule) and obj is not BotModule and package.__name__ in obj.__module__:
                return obj

        raise ModuleLoadError(f"No module class found in package {package.__name__}")

    async def load_module(self, module_name: str) -> bool:
        if module_name in self.modules:
            logger.info(f"Module {module_name} is already loaded")
            return True

        try:
            package = self._import_module_package(module_name)
            module_class = self._extract_module_class(package)
            instance = module_class(self.bot)
            await self.register_module(instance, key=module_name)
            logger.info(f"Successfully loaded module: {module_name}")
            return True

        except Exception as e:
            logger.error(f"Failed to load module {module_name}: {e}")
            return False

    async def register_module(self, module: BotModule, key: str | None = None) -> None:
        """Add an already constructed module and its commands to the table.

        Raises ``DuplicateCommandError`` without registering anything if one of
        the module's names or aliases is already taken.
        """
        key = key or module.name
        names: dict[str, CommandDeclaration] = {}
        for declaration in module.commands:
            for name in (declaration.name, *declaration.aliases):
                owner = self._commands.get(name.lower())
                if owner is not None:
                    raise DuplicateCommandError(name, owner[0].name)
                if name.lower() in names:
                    raise DuplicateCommandError(name, module.name)
                names[name.lower()] = declaration

        await module.on_load()
        for name, declaration in names.items():
            self._commands[name] = (module, declaration)
            logger.debug(f"Registered command: {name} from module {module.name}")
        self.modules[key] = module

    async def unload_module(self, module_name: str) -> bool:
        module = self.modules.get(module_name)
        if module is None:
            logger.warning(f"Module {module_name} is not loaded")
            return False

        try:
            await module.on_unload()
        except Exception as e:
            logger.error(f"Error while unloading module {module_name}: {e}")

        for name in [name for name, (owner, _) in self._commands.items() if owner is module]:
            del self._commands[name]
        del self.modules[module_name]
        sys.modules.pop(f"modules.{module_name}", None)

        logger.info(f"Successfully unloaded module: {module_name}")
        return True

    async def reload_module(self, module_name: str) -> bool:
        if await self.unload_module(module_name):
            return await self.load_module(module_name)
        return False

    async def load_all_modules(self, enabled_modules: list[str]) -> None:
        for module_name in enabled_modules:
            await self.load_module(module_name)

    def get_module(self, module_name: str) -> BotModule | None:
        return self.modules.get(module_name)

    def get_command(self, name: str) -> tuple[BotModule, CommandDeclaration] | None:
        return self._commands.get(name.lower())

    def get_loaded_modules(self) -> list[str]:
        return list(self.modules.keys())

    @property
    def command_names(self) -> list[str]:
        return sorted(self._commands)

    @property
    def required_intents(self) -> hikari.Intents:
        intents = hikari.Intents.NONE
        for module in self.modules.values():
            intents |= module.required_intents
        return intents
