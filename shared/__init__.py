"""공유 유틸리티 - tagging 도구와 CLI에서 공통 사용.

- vsphere: vCenter 연동 (세션, 인벤토리, CIS 태깅)

의존성 구조:
    core (인프라)
       ↑
    shared (공유 유틸리티)
       ↑
    tagging / cli
"""
