"""
确认交互

更新引擎通过 Prompter 请求用户输入一行文本，便于在测试中替换。
"""

from abc import ABC, abstractmethod

from loguru import logger

from modpack.exceptions import InputError


class Prompter(ABC):
    @abstractmethod
    def ask(self, question: str) -> str:
        """
        输出问题并读取一行回答。

        输入流关闭时必须抛出 InputError。
        """
        pass


class ConsolePrompter(Prompter):
    """从标准输入读取回答"""

    def ask(self, question: str) -> str:
        logger.info(question)
        try:
            return input()
        except EOFError as e:
            raise InputError("读取输入失败：输入流已关闭") from e


class AutoConfirm(Prompter):
    """对所有确认回答 y（--yes）"""

    def ask(self, question: str) -> str:
        logger.debug(f"{question} y")
        return "y"
