# utils/audio_utils.py
import math
import os
import struct
import wave
from array import array


class AudioUtils:
    """音声データに関連する共通処理を行うユーティリティクラス。"""

    TONE_FREQUENCY = 440  # A4
    TONE_SECONDS = 2
    SAMPLE_RATE = 22050

    @staticmethod
    def input_level(data: bytes) -> int:
        """16bit PCMのサンプル列から入力レベルを0〜100で計算する。

        Args:
            data (bytes): 符号付き16bitリトルエンディアンのPCMデータ。

        Returns:
            int: 平均振幅から求めた入力レベル。
        """
        if len(data) < 2:
            return 0
        samples = array('h')
        samples.frombytes(data[:len(data) - len(data) % 2])
        average = sum(abs(s) for s in samples) / len(samples)
        # 8bit換算（0〜128）の平均振幅を2倍したものをレベルとする
        return min(100, int(average / 256 * 2))

    @staticmethod
    def format_clock(seconds: int) -> str:
        """秒数を HH:MM:SS 形式の文字列にする。"""
        seconds = max(0, int(seconds))
        hours, rem = divmod(seconds, 3600)
        mins, secs = divmod(rem, 60)
        return f"{hours:02}:{mins:02}:{secs:02}"

    @staticmethod
    def format_position(seconds: float) -> str:
        """再生位置を m:ss 形式の文字列にする。"""
        seconds = max(0, int(seconds))
        return f"{seconds // 60}:{seconds % 60:02}"

    @classmethod
    def write_test_tone(cls, file_path: str) -> str:
        """機器チェック用の正弦波（440Hz, 2秒）のWAVファイルを書き出す。

        既に存在する場合は書き直さずにそのパスを返す。

        Args:
            file_path (str): 出力先のパス。

        Returns:
            str: 書き出したWAVファイルのパス。
        """
        if os.path.exists(file_path):
            return file_path
        os.makedirs(os.path.dirname(file_path) or ".", exist_ok=True)
        frames = bytearray()
        for i in range(cls.SAMPLE_RATE * cls.TONE_SECONDS):
            value = int(0.3 * 32767 * math.sin(2 * math.pi * cls.TONE_FREQUENCY * i / cls.SAMPLE_RATE))
            frames += struct.pack('<h', value)
        with wave.open(file_path, 'wb') as wav:
            wav.setnchannels(1)
            wav.setsampwidth(2)
            wav.setframerate(cls.SAMPLE_RATE)
            wav.writeframes(bytes(frames))
        return file_path
