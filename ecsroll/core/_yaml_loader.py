import yaml

from .exceptions import LoadError


class YamlLoader:
    @staticmethod
    def load(path: str) -> dict:
        try:
            with open(path, "r") as file:
                data = yaml.safe_load(file)
        except (OSError, yaml.YAMLError) as e:
            raise LoadError(f"Could not load {path}: {e}") from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise LoadError(f"{path} must contain a mapping.")
        return data
