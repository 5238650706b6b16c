import os

import uvicorn

from app.bootstrap.bootstrapper import bootstrap_api
from app.components.configuration.configuration_interface import (
    ConfigurationInterface,
)
from app.dependencies.components import get_components


def main():
    env = os.getenv("APP_ENV", "development")
    configuration = get_components(env=env).get_component(ConfigurationInterface)

    app = bootstrap_api(env=env)
    uvicorn.run(
        app,
        host=configuration.get_configuration("API_HOST", str, default="0.0.0.0"),
        port=configuration.get_configuration("API_PORT", int, default=8000),
    )


if __name__ == "__main__":
    main()
