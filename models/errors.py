"""输入文档错误。"""


class SceneDocumentError(ValueError):
    """场景文档结构不合法。"""


class ShotIndexError(ValueError):
    """镜头库索引结构不合法（含重复 id）。"""
