"""应用配置。"""
from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """全局配置，可从环境变量或 .env 读取。"""

    # 项目路径
    project_root: Path = Path(__file__).resolve().parent.parent
    index_path: Path = Path(__file__).resolve().parent.parent / "index.json"
    scenes_dir: Path = Path(__file__).resolve().parent.parent / "scenes"
    output_dir: Path = Path(__file__).resolve().parent.parent / "output"

    # 参考图与分析帧
    reference_base_url: str = "http://localhost:3333"
    frames_subdir: str = "analysis_3fps"
    frame_number_width: int = 4

    # 执行计划
    default_duration_sec: float = 5.0

    # 日志
    log_level: str = "INFO"
    log_file: Path | None = None

    # HTTP 服务
    host: str = "0.0.0.0"
    port: int = 3333

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    return Settings()
