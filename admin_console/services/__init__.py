"""服务层。"""
