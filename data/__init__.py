"""静态数据模块"""
