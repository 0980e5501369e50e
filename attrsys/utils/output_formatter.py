"""
输出格式化模块
使用rich库美化输出
"""

from typing import Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from attrsys.core.dependency import Dependency
from attrsys.core.grammar import Grammar, ProductionRule


def format_relations(relations: Dict, with_symbol_index: bool = False) -> str:
    """
    把关系集合格式化为排序后的字符串
    :param relations: 键到依赖的映射
    :param with_symbol_index: 是否显示符号下标（重新装饰的关系在子符号上，需要显示）
    """
    if not relations:
        return '∅'
    if with_symbol_index:
        items = sorted(_format_with_index(d) for d in relations.values())
    else:
        items = sorted(d.to_relation_string() for d in relations.values())
    return ', '.join(items)


def _format_with_index(dependency: Dependency) -> str:
    return (f"{dependency.from_attribute_name}[{dependency.from_symbol_index}] → "
            f"{dependency.to_attribute_name}[{dependency.to_symbol_index}]")


def _yes_no(value: bool) -> str:
    return "[green]是[/green]" if value else "[red]否[/red]"


class OutputFormatter:
    """输出格式化器"""

    def __init__(self, console: Optional[Console] = None):
        """
        初始化格式化器
        :param console: 输出用的控制台，测试时可传入 Console(record=True)
        """
        self.console = console or Console()

    def print_grammar(self, grammar: Grammar):
        """
        打印文法信息
        :param grammar: 文法对象
        """
        info_text = Text()
        info_text.append("非终结符: ", style="bold yellow")
        info_text.append(f"{sorted(grammar.all_nonterminal_names)}\n", style="cyan")
        info_text.append("终结符: ", style="bold yellow")
        info_text.append(f"{sorted(grammar.all_terminal_names)}\n", style="cyan")
        info_text.append("属性: ", style="bold yellow")
        info_text.append(f"{grammar.all_attribute_names_list}", style="cyan")

        panel = Panel(info_text, title="[bold magenta]属性文法信息[/bold magenta]",
                      border_style="magenta")
        self.console.print(panel)

        self.print_production_rules(grammar)

    def print_production_rules(self, grammar: Grammar):
        """打印产生式及每个符号的属性"""
        table = Table(title="产生式", show_header=True, header_style="bold magenta")
        table.add_column("编号", style="yellow", justify="center")
        table.add_column("产生式", style="cyan", justify="left")
        table.add_column("符号的属性", justify="left")
        table.add_column("结点数", justify="center")

        for rule in grammar.production_rules:
            table.add_row(
                str(rule.index),
                str(rule),
                self._format_symbol_attributes(rule),
                str(grammar.number_of_elements_per_rule[rule.index])
                if rule.index < len(grammar.number_of_elements_per_rule) else '-',
            )

        self.console.print("\n")
        self.console.print(table)

    def _format_symbol_attributes(self, rule: ProductionRule) -> str:
        lines = []
        for symbol_index, symbol in enumerate(rule.symbols):
            names = []
            for attribute in symbol.attributes.values():
                # 间接识别的属性用斜体标出
                names.append(f"[italic]{attribute.name}[/italic]" if attribute.indirectly_identified
                             else attribute.name)
            lines.append(f"{symbol.name}[{symbol_index}]: {', '.join(names) if names else '∅'}")
        return '\n'.join(lines)

    def print_errors(self, errors: List[str]):
        """
        打印文法错误列表
        :param errors: 错误消息
        """
        table = Table(title="文法错误", show_header=True, header_style="bold red", show_lines=True)
        table.add_column("序号", style="yellow", justify="center")
        table.add_column("错误", style="red", justify="left")

        for i, error in enumerate(errors, 1):
            table.add_row(str(i), Text(error))

        self.console.print("\n")
        self.console.print(table)

    def print_iteration(self, grammar: Grammar, iteration_index: int):
        """
        打印某一轮迭代的结果
        :param grammar: 已计算强无环性的文法
        :param iteration_index: 轮次下标
        """
        strong_acyclicity = grammar.strong_acyclicity
        stable = strong_acyclicity.is_iteration_stable[iteration_index]

        table = Table(
            title=f"第 {iteration_index} 轮迭代",
            show_header=True,
            header_style="bold magenta",
            show_lines=True
        )
        table.add_column("非终结符", style="cyan", justify="center")
        table.add_column("产生式", justify="left")
        table.add_column("重新装饰的关系", justify="left")
        table.add_column("根投影", justify="left")
        table.add_column("发现环", justify="center")
        table.add_column("R(X)", style="green", justify="left")
        table.add_column("稳定", justify="center")

        for nonterminal in strong_acyclicity.nonterminals.values():
            nonterminal_iteration = nonterminal.iterations[iteration_index]

            for position, rule in enumerate(nonterminal.production_rules):
                rule_iteration = rule.iterations[iteration_index]
                first_row = position == 0
                table.add_row(
                    nonterminal.name if first_row else '',
                    str(rule),
                    format_relations(rule_iteration.redecorated_relations, with_symbol_index=True),
                    format_relations(rule_iteration.root_projections),
                    _yes_no(rule_iteration.cycle_found),
                    format_relations(nonterminal_iteration.transitive_relations) if first_row else '',
                    _yes_no(nonterminal_iteration.is_stable) if first_row else '',
                )

        self.console.print("\n")
        self.console.print(table)
        self.console.print(f"本轮是否稳定: {_yes_no(stable)}")

    def print_all_iterations(self, grammar: Grammar):
        """打印所有轮次"""
        for iteration_index in range(grammar.strong_acyclicity.number_of_iterations()):
            self.print_iteration(grammar, iteration_index)

    def print_strong_acyclicity_result(self, grammar: Grammar):
        """打印最终结论"""
        strong_acyclicity = grammar.strong_acyclicity
        iterations = strong_acyclicity.number_of_iterations()

        if iterations == 0:
            self.print_info("尚未计算强无环性")
            return

        if strong_acyclicity.is_strongly_acyclic:
            self.print_success(f"经过 {iterations} 轮迭代，该属性文法是强无环的。")
        else:
            self.console.print(f"\n[bold red]✗ 经过 {iterations} 轮迭代，该属性文法不是强无环的。[/bold red]")

    def print_error(self, message: str):
        """
        打印错误消息
        :param message: 错误消息
        """
        self.console.print(f"[bold red]错误: {message}[/bold red]")

    def print_success(self, message: str):
        """
        打印成功消息
        :param message: 成功消息
        """
        self.console.print(f"[bold green]✓ {message}[/bold green]")

    def print_info(self, message: str):
        """
        打印信息消息
        :param message: 信息消息
        """
        self.console.print(f"[bold cyan]ℹ {message}[/bold cyan]")
