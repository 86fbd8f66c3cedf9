"""咖啡店订单 API 应用"""
