from fastapi.middleware.cors import CORSMiddleware

from campus_market.config import Settings


def configure_cors(app, settings: Settings):
    origins = settings.cors_origins
    # the storefront is a static site on another origin; open by default
    if not origins:
        origins = ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        max_age=86400,
    )
