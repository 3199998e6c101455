"""
Shared fixtures: a small quote database written to a temp directory.
"""
import os
import sys
from pathlib import Path

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from circuit_pricing.config.settings import Settings


CATEGORIES_CSV = """id,name,type,minimum_markup,is_active,description
CAT-1,Fiber Internet,Circuit,15,true,Dedicated and shared fiber
CAT-2,Cable Broadband,Circuit,20,true,Coax broadband
CAT-3,Fixed Wireless,Network,10,true,
CAT-4,Copper DSL,Circuit,,true,No markup policy yet
CAT-5,Legacy T1,Circuit,25,false,Retired
"""

CIRCUIT_QUOTES_CSV = """id,client_name,location,suite,deal_name,status,agent_email,agent_first_name,agent_last_name
CQ-100,Harbor Dental Group,1200 Harbor Blvd Oxnard CA,Suite 210,Harbor Dental Connectivity,completed,jordan.agent@example.com,Jordan,Reyes
CQ-101,Valley Logistics,88 Industrial Way Fresno CA,,,pending,,,
"""

CARRIER_QUOTES_CSV = """id,circuit_quote_id,display_order,carrier,type,speed,price,term,notes,color,install_fee,install_fee_amount,static_ip,static_ip_fee_amount,static_ip_5,static_ip_5_fee_amount,other_costs,no_service,site_survey_needed,site_survey_priority
CR-1,CQ-100,1,Spectrum,Cable,300/20 Mbps,100,36 months,,blue,true,360,true,10,false,,,false,false,
CR-2,CQ-100,2,AT&T,Fiber,1 Gbps,450,3 years,Site Survey: YELLOW pending landlord,green,false,,false,,true,50,40,false,true,
CR-3,CQ-100,3,Comcast,Cable,500/35 Mbps,0,,,,false,,false,,false,,,false,false,
CR-4,CQ-100,4,Frontier,Fiber,500 Mbps,250,,,,false,,false,,false,,,true,false,
CR-5,CQ-100,5,AT&T,Fiber,500 Mbps,350,36 months,,,false,,false,,false,,,false,true,green
CR-6,CQ-101,1,Verizon,Fixed Wireless,200 Mbps,180,12 months,,,true,500,false,,false,,,false,false,
"""

PROFILES_CSV = """email,role
admin@example.com,admin
jordan.agent@example.com,agent
"""


def make_settings(root: Path) -> Settings:
    """Settings pointing at ``root/data`` with no SMTP configured."""
    data_dir = root / 'data'
    return Settings(
        project_root=root,
        data_dir=data_dir,
        categories_csv=data_dir / 'categories.csv',
        carrier_quotes_csv=data_dir / 'carrier_quotes.csv',
        circuit_quotes_csv=data_dir / 'circuit_quotes.csv',
        profiles_csv=data_dir / 'profiles.csv',
        markup_workbook=data_dir / 'Markup Policies.xlsx',
        category_overrides_csv=data_dir / 'category_overrides.csv',
        build_report=data_dir / 'outputs' / 'build_report.json',
        outbox_path=data_dir / 'outputs' / 'outbox.jsonl',
        platform_url="https://platform.example.com/circuit-quotes",
    )


@pytest.fixture
def settings(tmp_path):
    """Settings over a populated temp data directory."""
    settings = make_settings(tmp_path)
    settings.data_dir.mkdir(parents=True)
    settings.categories_csv.write_text(CATEGORIES_CSV, encoding='utf-8')
    settings.circuit_quotes_csv.write_text(CIRCUIT_QUOTES_CSV, encoding='utf-8')
    settings.carrier_quotes_csv.write_text(CARRIER_QUOTES_CSV, encoding='utf-8')
    settings.profiles_csv.write_text(PROFILES_CSV, encoding='utf-8')
    return settings


@pytest.fixture
def empty_settings(tmp_path):
    """Settings over a data directory with no files."""
    settings = make_settings(tmp_path)
    settings.data_dir.mkdir(parents=True)
    return settings
