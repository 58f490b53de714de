"""
裁判所サイト群から裁判所・支部・出張所の名称を収集する
"""

__version__ = "0.1.0"
