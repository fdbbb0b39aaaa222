"""Entry point for `python -m keyauth` and the `keyauth` console script."""

import logging
import sys

import uvicorn

from keyauth.settings import build_config, load_settings


def main() -> None:
    from keyauth.server import create_app

    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # ConfigurationError (no validator) ends the process here.
    app = create_app(build_config(settings))

    if settings.ciam_domain:
        print(f"Validating keys against session service {settings.ciam_domain}", file=sys.stderr)
    else:
        print("Validating keys against KEYAUTH_API_KEY", file=sys.stderr)
    print(f"Listening on {settings.host}:{settings.port}", file=sys.stderr)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level)


if __name__ == "__main__":
    main()
