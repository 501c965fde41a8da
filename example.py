"""
使用示例
"""
from literal_table import (
    TableConfig,
    namespace_resolver,
    read_table,
    read_template_rows,
    read_tree,
    to_source,
)

SALES = """
| :date        | :product | :revenue |
| str          |          | int      |
| ---          | ---      | ---      |
| "2024-01-01" | "A"      | "1000"   |
| "2024-01-02" | "B"      | "2000"   |
"""


# 示例 1: 记录列表
def example_maps():
    records = read_table(SALES, resolver=namespace_resolver({"str": str, "int": int}), format="maps")
    for record in records:
        print(record)
    return records


# 示例 2: 自定义配置（重命名 + 命名空间 + DataFrame）
def example_dataframe():
    config = TableConfig(
        format="dataframe",
        renames={"revenue": "income"},
        ns="sales",
    )
    df = read_table(SALES, config, resolver=namespace_resolver({"str": str, "int": int}))
    print(df)


# 示例 3: 按模板重建嵌套对象
def example_tree():
    template = """
    | Order  | :id    | :customer |
    |        |        |           |
    | Lines  |        |           |
    | :lines |        |           |
    | :sku   | :qty   |           |
    """
    data = """
    | Order  |        |           |
    |        | 42     | "ACME"    |
    |        |        |           |
    | Lines  |        |           |
    | "X-1"  | 3      |           |
    | "Y-2"  | 1      |           |
    """
    print(read_tree(template, data))


# 示例 4: 单遍模板
def example_template_rows():
    print(read_template_rows("| * | |\n| :id | :qty |", "| 1 | 10 |\n| 2 | 20 |"))


# 示例 5: 反向生成表格源码
def example_source():
    print(to_source(example_maps()))


if __name__ == "__main__":
    print("Literal Table 使用示例")
    print("=" * 50)
    example_maps()
    example_dataframe()
    example_tree()
    example_template_rows()
    example_source()
