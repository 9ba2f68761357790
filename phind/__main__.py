from phind.main import entrypoint

entrypoint()
