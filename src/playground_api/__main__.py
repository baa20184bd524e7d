"""``python -m playground_api`` runs the same server as ``cipher-stepper serve``."""

from cipher_stepper.cli import serve

if __name__ == "__main__":
    serve(auto_envvar_prefix="CIPHER_STEPPER_SERVE")
