"""
强无环性检查程序
解析属性文法，逐轮显示强无环性计算的结果
"""

import argparse
import sys
from typing import List, Optional, Tuple

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from attrsys.config.analysis_config import analysis_config
from attrsys.core.grammar_parser import GrammarParser
from attrsys.utils.analysis_exporter import AnalysisExporter
from attrsys.utils.dependency_graph_exporter import DependencyGraphExporter
from attrsys.utils.grammar_library import GrammarLibrary
from attrsys.utils.logging_setup import configure_logging
from attrsys.utils.output_formatter import OutputFormatter


EXIT_OK = 0
EXIT_GRAMMAR_ERRORS = 1
EXIT_BAD_INPUT = 2


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='attrsys',
        description='属性文法的强无环性检查',
    )
    parser.add_argument('grammar_file', nargs='?', help='属性文法文件，每行一个产生式')
    parser.add_argument('--example', type=int, metavar='N',
                        help='使用示例库中的第 N 个文法（从1开始）')
    parser.add_argument('--library', metavar='PATH',
                        help='示例库JSON文件，默认使用自带的示例库')
    parser.add_argument('--json', action='store_true', help='以JSON格式输出分析结果')
    parser.add_argument('--dot', metavar='RULE[:ITERATION]',
                        help='输出某个产生式（某一轮）的依赖图 DOT 文本')
    parser.add_argument('--log-level', default=None,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='日志级别')
    return parser


def parse_dot_argument(value: str) -> Tuple[int, Optional[int]]:
    """
    解析 --dot 参数，例如 "0" 或 "0:1"
    :return: (产生式编号, 轮次下标或None)
    """
    parts = value.split(':')
    if len(parts) > 2:
        raise ValueError(f"--dot 参数格式错误: {value}")
    rule_index = int(parts[0])
    iteration_index = int(parts[1]) if len(parts) == 2 else None
    return rule_index, iteration_index


def choose_grammar_interactively(library: GrammarLibrary, console: Console) -> str:
    """显示示例库菜单，返回所选文法的文本"""
    title = Panel(
        "[bold cyan]属性文法强无环性检查[/bold cyan]\n\n"
        "逐轮计算传递关系、根投影和重新装饰的关系",
        border_style="cyan",
        padding=(1, 2)
    )
    console.print(title)

    console.print("\n[bold yellow]请选择属性文法：[/bold yellow]\n")

    menu_table = Table(show_header=False, box=box.SIMPLE, padding=(0, 2))
    menu_table.add_column("选项", style="cyan", justify="right")
    menu_table.add_column("文法", style="green")

    for i, entry in enumerate(library.entries, 1):
        menu_table.add_row(f"[{i}]", entry.title)
    console.print(menu_table)

    choice = Prompt.ask(
        "\n请输入选项编号",
        choices=[str(i) for i in range(1, len(library) + 1)],
        default="1",
        console=console,
    )

    entry = library.get(int(choice) - 1)
    console.print(f"\n[cyan]✓ 已选择: {entry.title}[/cyan]")
    return entry.text


def read_grammar_text(args: argparse.Namespace, console: Console) -> str:
    """根据命令行参数取得文法文本"""
    if args.grammar_file:
        with open(args.grammar_file, 'r', encoding='utf-8-sig') as f:
            return f.read()

    library = GrammarLibrary.load_or_default(args.library)

    if args.example is not None:
        if not 1 <= args.example <= len(library):
            raise ValueError(f"示例库中只有 {len(library)} 个文法")
        return library.get(args.example - 1).text

    return choose_grammar_interactively(library, console)


def run(args: argparse.Namespace, console: Console) -> int:
    formatter = OutputFormatter(console)

    try:
        grammar_text = read_grammar_text(args, console)
        dot_target = parse_dot_argument(args.dot) if args.dot else None
    except (OSError, ValueError) as e:
        formatter.print_error(str(e))
        return EXIT_BAD_INPUT

    grammar = GrammarParser.parse_from_text(grammar_text)

    if grammar.has_errors():
        formatter.print_errors(grammar.errors)
        return EXIT_GRAMMAR_ERRORS

    if args.json:
        console.print_json(AnalysisExporter(grammar).export_to_json())
        return EXIT_OK

    if dot_target is not None:
        rule_index, iteration_index = dot_target
        try:
            exporter = DependencyGraphExporter(grammar, rule_index, iteration_index)
        except IndexError as e:
            formatter.print_error(str(e))
            return EXIT_BAD_INPUT
        console.print(exporter.to_dot(), markup=False, highlight=False)
        return EXIT_OK

    formatter.print_grammar(grammar)
    formatter.print_all_iterations(grammar)
    formatter.print_strong_acyclicity_result(grammar)
    return EXIT_OK


def main(argv: Optional[List[str]] = None, console: Optional[Console] = None) -> int:
    """主程序"""
    args = build_argument_parser().parse_args(argv)

    if args.log_level:
        analysis_config.set_log_level(args.log_level)
    configure_logging()

    return run(args, console or Console())


if __name__ == "__main__":
    sys.exit(main())
