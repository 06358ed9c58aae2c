"""Sample data loaded into the in-memory backend."""

from __future__ import annotations

from datetime import date

from townhall.minutes.models import MeetingMinute
from townhall.schedule.models import ScheduleItem
from townhall.workflows.models import Workflow, WorkflowFile


def seed_minutes() -> list[MeetingMinute]:
    return [
        MeetingMinute(
            id="1",
            title="2024年5月定例役員会",
            date=date(2024, 5, 15),
            transcription="役員会の文字起こしサンプルです...",
            minutes="5月役員会議事録サンプル...",
            summary="主要決定事項：夏祭りの日程決定。アクションアイテム：XXさんが提灯を手配。",
        ),
        MeetingMinute(
            id="2",
            title="夏祭り実行委員会 #1",
            date=date(2024, 6, 1),
            transcription="夏祭り委員会の文字起こしです...",
            minutes="夏祭り委員会議事録...",
            summary="屋台の配置、ボランティア募集について議論。",
        ),
    ]


def seed_schedule() -> list[ScheduleItem]:
    return [
        ScheduleItem(id="1", date=date(2024, 7, 20), title="夏祭り準備会"),
        ScheduleItem(
            id="2", date=date(2024, 8, 10), title="夏祭り当日", description="会場設営 9:00〜"
        ),
        ScheduleItem(id="3", date=date(2024, 10, 1), title="会費集金開始"),
        ScheduleItem(id="4", date=date(2024, 10, 30), title="会費集金締切"),
        ScheduleItem(id="5", date=date(2025, 3, 15), title="総会準備"),
        ScheduleItem(id="6", date=date(2025, 4, 5), title="定期総会"),
    ]


def seed_workflows() -> list[Workflow]:
    return [
        Workflow(
            id="1",
            name="会費集金フロー",
            description="年会費の集金手順を図示します。",
            mermaid_code=(
                "graph TD\n"
                "    A[集金案内配布] --> B{集金期間};\n"
                "    B --> |集金完了| C[会計へ入金];\n"
                "    B --> |未納者| D[督促状送付];\n"
                "    D --> B;\n"
                "    C --> E[完了];\n"
            ),
            files=[WorkflowFile(id="f1", name="集金案内状テンプレート.docx")],
        ),
        Workflow(
            id="2",
            name="新役員選出フロー",
            mermaid_code=(
                "graph LR\n"
                "    A[候補者募集] --> B(推薦受付);\n"
                "    B --> C{役員会承認};\n"
                "    C --> |承認| D[総会へ上程];\n"
                "    C --> |否決| A;\n"
                "    D --> E((選出完了));\n"
            ),
        ),
    ]
