"""
分析配置模块
控制文法解析和强无环性计算的可选行为
"""


class AnalysisConfig:
    """分析配置（全局单例）"""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True
        self.reset()

    def reset(self):
        """恢复默认配置"""
        # 只含空白的方程（例如行尾多余的 ';'）默认报告缺少 '='，设为True时直接跳过
        self.ignore_blank_equations = False
        # 文法有错误时不进行强无环性计算
        self.analyze_grammar_with_errors = False
        # 命令行日志级别
        self.log_level = 'WARNING'

    def set_log_level(self, level: str):
        """设置日志级别（DEBUG、INFO、WARNING、ERROR）"""
        self.log_level = level.upper()


# 全局配置实例
analysis_config = AnalysisConfig()
