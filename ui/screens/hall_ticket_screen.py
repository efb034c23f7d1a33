# ui/screens/hall_ticket_screen.py
from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QFormLayout, QFrame, QLabel, QPushButton, QVBoxLayout, QWidget

from models.session_models import HallTicketData
from services.exam_controller import ExamPhaseController


class HallTicketScreen(QWidget):
    """
    受験票画面
    - 受験者情報の表示
    - 注意事項の表示
    - 「次へ」で機器チェックへ進む
    """

    def __init__(self, controller: ExamPhaseController, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.ticket: HallTicketData = controller.config.hall_ticket
        self.setup_ui()
        self.setup_connections()

    def setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        title = QLabel("प्रवेशपत्र / 受験票")
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        title.setStyleSheet("font-size: 20pt; font-weight: bold;")
        layout.addWidget(title)

        card = QFrame()
        card.setFrameShape(QFrame.Shape.StyledPanel)
        card.setMinimumWidth(520)
        form = QFormLayout(card)
        rows = [
            ("氏名", self.ticket.name),
            ("受験番号", self.ticket.roll_number),
            ("試験日", self.ticket.exam_date),
            ("開始時刻", self.ticket.exam_time),
            ("試験会場", self.ticket.exam_center),
            ("科目", self.ticket.subject),
        ]
        self.value_labels = {}
        for caption, value in rows:
            value_label = QLabel(value)
            value_label.setStyleSheet("font-size: 13pt; font-weight: bold;")
            form.addRow(QLabel(caption), value_label)
            self.value_labels[caption] = value_label
        layout.addWidget(card)

        instructions = QLabel("注意事項:\n" + "\n".join(f"・{line}" for line in self.ticket.instructions))
        instructions.setWordWrap(True)
        instructions.setStyleSheet("color: #555; padding: 8px;")
        layout.addWidget(instructions)

        self.next_button = QPushButton("次へ")
        self.next_button.setMinimumHeight(36)
        layout.addWidget(self.next_button, alignment=Qt.AlignmentFlag.AlignCenter)

    def setup_connections(self):
        self.next_button.clicked.connect(lambda: self.controller.advance())
