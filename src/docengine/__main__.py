"""doc-engine MCPサーバーのコマンドラインエントリポイント。"""

if __name__ == "__main__":
    import logging

    from docengine.config import EngineConfig
    from docengine.server import run_http

    config = EngineConfig()
    logging.basicConfig(level=config.log_level.upper())
    run_http(config)
