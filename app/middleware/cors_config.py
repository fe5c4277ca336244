from fastapi.middleware.cors import CORSMiddleware


def configure_cors(app, origins):
    # the storefront UI is served from a different origin than the API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(origins) or ["http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        max_age=86400,
    )
