"""
好みと場所から1日の外出プランを作るWebアプリ。
Day-itinerary planner built on Flask.
"""

__version__ = "0.1.0"
