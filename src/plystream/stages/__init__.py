"""Points-processing stages. Each subpackage exposes config.py and stage.py."""
