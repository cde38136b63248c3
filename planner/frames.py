"""分析帧与参考图路径。"""
from __future__ import annotations

from config.settings import Settings, get_settings
from models.reference import ReferenceShot


def analysis_frame_path(scene_id: str, frame: int, settings: Settings | None = None) -> str:
    """例：/scenes/<scene_id>/analysis_3fps/frame_0042.jpg"""
    s = settings or get_settings()
    number = str(frame).zfill(s.frame_number_width)
    return f"/scenes/{scene_id}/{s.frames_subdir}/frame_{number}.jpg"


def reference_image_url(ref: ReferenceShot, settings: Settings | None = None) -> str | None:
    if not ref.image:
        return None
    s = settings or get_settings()
    return f"{s.reference_base_url.rstrip('/')}/{ref.image.lstrip('/')}"


def last_frame_placeholder(shot_id: str) -> str:
    """生成完成后由执行方替换为该镜头输出的最后一帧。"""
    return f"{{output_{shot_id}_last_frame}}"
