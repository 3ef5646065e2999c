from pyreqwest_easy.pytest_plugin.mock import transport_mocker  # load the transport_mocker fixture

__all__ = ["transport_mocker"]
