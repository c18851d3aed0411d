from playground_tools.converter.output import (
    assemble,
    merge_imports,
    split_output,
    unhandled_notice,
)
from playground_tools.shared.targets import Target

PYDANTIC_CODE = """from typing import Optional
from pydantic import BaseModel


class User(BaseModel):
    name: str
    nickname: Optional[str] = None
"""


class TestSplitOutput:
    def test_pydantic_split(self):
        split = split_output(PYDANTIC_CODE, Target.PYDANTIC)
        assert split.imports == ("from typing import Optional", "from pydantic import BaseModel")
        assert split.body.startswith("class User(BaseModel):")
        assert split.body.endswith("nickname: Optional[str] = None")

    def test_import_block_never_reopens(self):
        code = "import json\nx = 1\nimport os\n"
        split = split_output(code, Target.PYDANTIC)
        assert split.imports == ("import json",)
        assert split.body == "x = 1\nimport os"

    def test_blank_line_closes_block(self):
        code = "import json\n\nimport os\nx = 1"
        split = split_output(code, Target.PYDANTIC)
        assert split.imports == ("import json",)
        assert "import os" in split.body

    def test_typescript_split(self):
        code = 'import { z } from "zod";\nexport interface User {\n  name: string;\n}\n'
        split = split_output(code, Target.TYPESCRIPT)
        assert split.imports == ('import { z } from "zod";',)
        assert split.body == "export interface User {\n  name: string;\n}"

    def test_typescript_ignores_python_from(self):
        split = split_output("from x import y\n", Target.TYPESCRIPT)
        assert split.imports == ()

    def test_no_imports(self):
        split = split_output("class A(BaseModel):\n    x: int\n", Target.PYDANTIC)
        assert split.imports == ()
        assert split.body == "class A(BaseModel):\n    x: int"


class TestMergeImports:
    def test_pydantic_groups_and_sorts(self):
        merged = merge_imports(
            [
                ["from typing import Optional", "from pydantic import BaseModel"],
                ["from typing import List", "from pydantic import Field, BaseModel"],
            ],
            Target.PYDANTIC,
        )
        assert merged == [
            "from pydantic import BaseModel, Field",
            "from typing import List, Optional",
        ]

    def test_pydantic_standalone_after_grouped(self):
        merged = merge_imports(
            [["import uuid", "from enum import Enum"], ["import datetime", "import uuid"]],
            Target.PYDANTIC,
        )
        assert merged == ["from enum import Enum", "import datetime", "import uuid"]

    def test_pydantic_empty(self):
        assert merge_imports([[], []], Target.PYDANTIC) == []

    def test_typescript_dedups_in_first_seen_order(self):
        merged = merge_imports(
            [
                ['import { z } from "zod";', 'import type { A } from "./a";'],
                ['import { z } from "zod";', 'import { b } from "./b";'],
            ],
            Target.TYPESCRIPT,
        )
        assert merged == [
            'import { z } from "zod";',
            'import type { A } from "./a";',
            'import { b } from "./b";',
        ]

    def test_typescript_keeps_distinct_item_lists(self):
        merged = merge_imports(
            [['import { a } from "m";'], ['import { b } from "m";']],
            Target.TYPESCRIPT,
        )
        assert len(merged) == 2


class TestUnhandledNotice:
    def test_empty(self):
        assert unhandled_notice([], Target.PYDANTIC) == ""

    def test_pydantic(self):
        notice = unhandled_notice(["Draft", "Internal"], Target.PYDANTIC)
        lines = notice.split("\n")
        assert len(lines) == 3
        assert all(line.startswith("# ") for line in lines)
        assert lines[1] == "# Draft, Internal"
        assert "export const Draft = z...." in lines[2]

    def test_typescript_prefix(self):
        notice = unhandled_notice(["Draft"], Target.TYPESCRIPT)
        assert all(line.startswith("// ") for line in notice.split("\n"))


class TestAssemble:
    def test_full_layout(self):
        output = assemble(
            ["from pydantic import BaseModel"],
            ['class RoleEnum(str, Enum):\n    ADMIN = "admin"'],
            ["class A(BaseModel):\n    x: int", "class B(BaseModel):\n    y: int"],
            [],
            Target.PYDANTIC,
        )
        assert output == (
            "from pydantic import BaseModel\n"
            "\n"
            "class RoleEnum(str, Enum):\n"
            '    ADMIN = "admin"\n'
            "\n"
            "class A(BaseModel):\n"
            "    x: int\n"
            "\n"
            "class B(BaseModel):\n"
            "    y: int"
        )

    def test_no_imports_no_spacer(self):
        output = assemble([], [], ["# Error in schema 'A': boom"], [], Target.PYDANTIC)
        assert output == "# Error in schema 'A': boom"

    def test_notice_is_last(self):
        output = assemble([], [], ["class A: pass"], ["Draft"], Target.PYDANTIC)
        head, notice = output.split("\n\n", 1)
        assert head == "class A: pass"
        assert notice.startswith("# Note:")
        assert "Draft" in notice.split("\n")[-1]
