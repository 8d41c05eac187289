# module vault.app
from vault.app_setup.factory import create_app

# App globale
app = create_app()
