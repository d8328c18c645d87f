"""
tagging - vCenter 태그 동기화 도구

    tagging/
    └── esxi_release/   # 빌드 번호 → ESXi 릴리스 이름 태그
"""
